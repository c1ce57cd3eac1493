"""Media provider registry and URL resolution order."""

import pytest

from spotter.exceptions import ConfigError
from spotter.media import (
    ExerciseDBProvider,
    MediaProviderRegistry,
    available_libraries,
    build_default_registry,
    load_provider_mappings,
    media_sources,
    resolve_media_url,
)
from spotter.models import Exercise

BENCH = Exercise(
    exercise_id="0001",
    name="barbell bench press",
    media_url="https://v1.cdn.exercisedb.dev/media/0001.gif",
)
NO_GIF = Exercise(exercise_id="0002", name="dumbbell bench press")

MAPPINGS = {
    "gymAnimations": {"0001": "ga-bench"},
    "wrkout": {"0001": "Bench_Press/0", "0002": "Dumbbell_Bench/0"},
}


@pytest.fixture
def registry():
    return build_default_registry(MAPPINGS)


class TestResolution:

    def test_exercisedb_host_is_rewritten(self):
        registry = build_default_registry()

        assert resolve_media_url(BENCH, registry) == "https://static.exercisedb.dev/media/0001.gif"

    def test_free_providers_by_priority(self, registry):
        url = resolve_media_url(BENCH, registry)

        assert url == "https://raw.githubusercontent.com/wrkout/exercises.json/master/media/Bench_Press/0.gif"

    def test_premium_first_when_entitled(self, registry):
        url = resolve_media_url(BENCH, registry, has_premium=True)

        assert url == "https://cdn.gymanimations.com/media/ga-bench.mp4"

    def test_preferred_provider(self, registry):
        url = resolve_media_url(BENCH, registry, preferred="exercisedb")

        assert url.startswith("https://static.exercisedb.dev/")

    def test_preferred_premium_without_entitlement_falls_back(self, registry):
        url = resolve_media_url(BENCH, registry, preferred="gymAnimations")

        assert "gymanimations" not in url

    def test_unknown_preferred_provider_is_ignored(self, registry):
        assert resolve_media_url(NO_GIF, registry, preferred="nope").endswith("Dumbbell_Bench/0.gif")

    def test_nothing_available(self):
        assert resolve_media_url(NO_GIF, build_default_registry()) == ""


class TestRegistry:

    def test_providers_sorted_by_priority(self, registry):
        assert [p.provider_id for p in registry.providers()] == [
            "gymAnimations", "exerciseAnimatic", "wrkout", "exercisedb",
        ]
        assert registry.default_provider.provider_id == "exercisedb"

    def test_sources_respect_entitlement(self, registry):
        free = media_sources(BENCH, registry)
        premium = media_sources(BENCH, registry, has_premium=True)

        assert [s.provider for s in free] == ["wrkout", "exercisedb"]
        assert [s.provider for s in premium] == ["gymAnimations", "wrkout", "exercisedb"]
        assert premium[0].to_dict()["quality"] == "hd"

    def test_library_listing(self, registry):
        libraries = {lib["id"]: lib["available"] for lib in available_libraries(registry)}

        assert libraries == {
            "gymAnimations": False, "exerciseAnimatic": False, "wrkout": True, "exercisedb": True,
        }

    def test_register_new_provider(self):
        class LocalProvider(ExerciseDBProvider):
            provider_id = "local"
            priority = 1

        registry = MediaProviderRegistry(ExerciseDBProvider())
        registry.register(LocalProvider())

        assert registry.providers()[0].provider_id == "local"


def test_load_provider_mappings(tmp_path):
    path = tmp_path / "media.yaml"
    path.write_text('wrkout:\n  "0001": Bench_Press/0\n  2: Squat/0\n')
    mappings = load_provider_mappings(path)

    assert mappings["wrkout"] == {"0001": "Bench_Press/0", "2": "Squat/0"}


def test_load_provider_mappings_rejects_flat_file(tmp_path):
    path = tmp_path / "media.yaml"
    path.write_text("wrkout: Bench_Press\n")

    with pytest.raises(ConfigError):
        load_provider_mappings(path)
