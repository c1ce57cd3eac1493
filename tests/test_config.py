"""Settings loading: YAML file, environment overrides, defaults."""

import pytest

from spotter.catalog import DEFAULT_CATALOG_PATH
from spotter.config import DEFAULT_SAFETY_TAGS_PATH, Settings, load_settings
from spotter.exceptions import ConfigError
from spotter.media import GymAnimationsProvider

ENV_VARS = (
    "SPOTTER_CATALOG_PATH",
    "SPOTTER_SAFETY_TAGS_PATH",
    "SPOTTER_MEDIA_MAPPINGS_PATH",
    "SPOTTER_MIN_SAFE_EXERCISES",
    "SPOTTER_LOG_LEVEL",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


def _write(tmp_path, text):
    path = tmp_path / "spotter.yaml"
    path.write_text(text)
    return path


def test_empty_file_gives_defaults(tmp_path):
    settings = load_settings(_write(tmp_path, ""))

    assert settings == Settings()
    assert settings.catalog_path == DEFAULT_CATALOG_PATH
    assert settings.safety_tags_path == DEFAULT_SAFETY_TAGS_PATH


def test_yaml_values_and_relative_paths(tmp_path):
    settings = load_settings(_write(tmp_path, (
        "catalog_path: data/catalog.json\n"
        "min_safe_exercises: 8\n"
        "default_session_minutes: 50\n"
        "log_level: debug\n"
    )))

    assert settings.catalog_path == tmp_path / "data" / "catalog.json"
    assert settings.min_safe_exercises == 8
    assert settings.default_session_minutes == 50
    assert settings.log_level == "DEBUG"


def test_environment_overrides_file(tmp_path, monkeypatch):
    monkeypatch.setenv("SPOTTER_MIN_SAFE_EXERCISES", "12")
    monkeypatch.setenv("SPOTTER_CATALOG_PATH", "/srv/catalog.json")
    settings = load_settings(_write(tmp_path, "min_safe_exercises: 8\n"))

    assert settings.min_safe_exercises == 12
    assert str(settings.catalog_path) == "/srv/catalog.json"


def test_bad_integer(tmp_path):
    with pytest.raises(ConfigError):
        load_settings(_write(tmp_path, "warmup_minutes: soon\n"))


def test_negative_integer(tmp_path):
    with pytest.raises(ConfigError):
        load_settings(_write(tmp_path, "cooldown_minutes: -1\n"))


def test_non_mapping_file(tmp_path):
    with pytest.raises(ConfigError):
        load_settings(_write(tmp_path, "- a\n- b\n"))


def test_explicit_missing_file(tmp_path):
    with pytest.raises(ConfigError):
        load_settings(tmp_path / "nope.yaml")


def test_bundled_resolver_has_tags():
    assert Settings().metadata_resolver().tagged_count > 0


def test_media_registry_uses_mapping_file(tmp_path):
    mappings = tmp_path / "media.yaml"
    mappings.write_text('gymAnimations:\n  "0001": bench-press\n')
    settings = load_settings(_write(tmp_path, f"media_mappings_path: {mappings.name}\n"))

    provider = settings.media_registry().get_provider(GymAnimationsProvider.provider_id)
    assert provider.mapped_count == 1
