"""
Exercise media resolution.

Demonstration media (GIF/video) comes from a set of registered providers.
Each provider answers three questions for an exercise: does it have media,
what is the primary URL, and which sources (format/quality) it offers.
Adding a library means registering another provider; resolution order is
driven purely by provider priority and premium entitlement.

Lower priority value = tried first.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
from types import MappingProxyType
from typing import Dict, List, Mapping, Optional, Union

import yaml

from .exceptions import ConfigError
from .models import Exercise

logger = logging.getLogger(__name__)

AUTO = "auto"


@dataclass(frozen=True)
class MediaSource:
    url: str
    format: str      # gif, mp4, webm
    quality: str     # standard, hd, 4k
    provider: str

    def to_dict(self) -> Dict[str, str]:
        return {"url": self.url, "format": self.format, "quality": self.quality, "provider": self.provider}


class MediaProvider(ABC):
    """A demonstration media library."""

    provider_id: str = ""
    name: str = ""
    description: str = ""
    is_premium: bool = False
    priority: int = 100

    @abstractmethod
    def has_media(self, exercise: Exercise) -> bool:
        """True if this library can show the exercise."""

    @abstractmethod
    def media_url(self, exercise: Exercise) -> Optional[str]:
        """Primary media URL, or None."""

    @abstractmethod
    def media_sources(self, exercise: Exercise) -> List[MediaSource]:
        """All sources this library offers for the exercise."""


class ExerciseDBProvider(MediaProvider):
    """Catalog GIFs; always registered and used as the terminal fallback."""

    provider_id = "exercisedb"
    name = "ExerciseDB"
    description = "Free, open-source exercise GIFs (1500+ exercises)"
    is_premium = False
    priority = 10

    def has_media(self, exercise: Exercise) -> bool:
        return bool(exercise.media_url)

    def media_url(self, exercise: Exercise) -> Optional[str]:
        if not exercise.media_url:
            return None
        # The v1 CDN host is retired; the same paths live on the static host
        return exercise.media_url.replace("v1.cdn.exercisedb.dev", "static.exercisedb.dev")

    def media_sources(self, exercise: Exercise) -> List[MediaSource]:
        url = self.media_url(exercise)
        if not url:
            return []
        return [MediaSource(url=url, format="gif", quality="standard", provider=self.provider_id)]


class MappedMediaProvider(MediaProvider):
    """
    Library addressed by its own asset ids.

    Subclasses set the URL template and source format; the exercise-id to
    asset-id mapping is supplied at construction and never mutated.
    """

    url_template: str = ""
    media_format: str = "gif"
    quality: str = "standard"

    def __init__(self, mapping: Optional[Mapping[str, str]] = None):
        self._mapping = MappingProxyType(dict(mapping or {}))

    @property
    def mapped_count(self) -> int:
        return len(self._mapping)

    def has_media(self, exercise: Exercise) -> bool:
        return exercise.exercise_id in self._mapping

    def media_url(self, exercise: Exercise) -> Optional[str]:
        asset_id = self._mapping.get(exercise.exercise_id)
        if not asset_id:
            return None
        return self.url_template.format(asset_id=asset_id)

    def media_sources(self, exercise: Exercise) -> List[MediaSource]:
        url = self.media_url(exercise)
        if not url:
            return []
        return [MediaSource(url=url, format=self.media_format, quality=self.quality, provider=self.provider_id)]


class GymAnimationsProvider(MappedMediaProvider):
    provider_id = "gymAnimations"
    name = "Gym Animations 3D"
    description = "Premium 3D realistic animations (7000+ exercises)"
    is_premium = True
    priority = 5
    url_template = "https://cdn.gymanimations.com/media/{asset_id}.mp4"
    media_format = "mp4"
    quality = "hd"


class ExerciseAnimaticProvider(MappedMediaProvider):
    provider_id = "exerciseAnimatic"
    name = "Exercise Animatic"
    description = "Premium 4K animations (2000+ exercises)"
    is_premium = True
    priority = 6
    url_template = "https://cdn.exerciseanimatic.com/media/{asset_id}.mp4"
    media_format = "mp4"
    quality = "4k"


class WrkoutProvider(MappedMediaProvider):
    provider_id = "wrkout"
    name = "Wrkout Exercises"
    description = "Free public domain exercises (2500+ with videos)"
    is_premium = False
    priority = 9
    url_template = "https://raw.githubusercontent.com/wrkout/exercises.json/master/media/{asset_id}.gif"


class MediaProviderRegistry:
    """
    Priority-ordered provider set with a fixed default provider.

    Build one at process start and pass it to the resolution functions.
    """

    def __init__(self, default_provider: MediaProvider):
        self._providers: Dict[str, MediaProvider] = {}
        self.register(default_provider)
        self._default = default_provider

    def register(self, provider: MediaProvider) -> None:
        """Add a provider (replaces any provider with the same id)."""
        self._providers[provider.provider_id] = provider
        tier = "PREMIUM" if provider.is_premium else "FREE"
        logger.debug(f"Registered media provider: {provider.name} ({tier})")

    def get_provider(self, provider_id: str) -> Optional[MediaProvider]:
        return self._providers.get(provider_id)

    def providers(self) -> List[MediaProvider]:
        """All providers, lowest priority value first (stable by registration)."""
        return sorted(self._providers.values(), key=lambda p: p.priority)

    @property
    def default_provider(self) -> MediaProvider:
        return self._default


def build_default_registry(mappings: Optional[Mapping[str, Mapping[str, str]]] = None) -> MediaProviderRegistry:
    """
    Registry with the four built-in libraries.

    Args:
        mappings: Optional provider id -> {exercise id: asset id}

    Returns:
        MediaProviderRegistry with ExerciseDB as the default provider
    """
    mappings = mappings or {}
    registry = MediaProviderRegistry(ExerciseDBProvider())
    registry.register(GymAnimationsProvider(mappings.get(GymAnimationsProvider.provider_id)))
    registry.register(ExerciseAnimaticProvider(mappings.get(ExerciseAnimaticProvider.provider_id)))
    registry.register(WrkoutProvider(mappings.get(WrkoutProvider.provider_id)))
    return registry


def load_provider_mappings(path: Union[str, Path]) -> Mapping[str, Mapping[str, str]]:
    """
    Load asset-id mappings for the mapped providers.

    Expected layout::

        gymAnimations:
          "0001": "ga_3_4_sit_up"
        wrkout:
          "0025": "Barbell_Bench_Press"

    Raises:
        ConfigError: If the file is unreadable or not a mapping of mappings
    """
    path = Path(path)
    try:
        with open(path) as f:
            raw = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as e:
        raise ConfigError(f"Could not read media mappings from {path}: {e}") from e

    if not isinstance(raw, dict) or not all(isinstance(v, dict) for v in raw.values()):
        raise ConfigError(f"Media mappings in {path} must map provider ids to exercise mappings")

    return MappingProxyType({
        str(provider_id): MappingProxyType({str(k): str(v) for k, v in mapping.items()})
        for provider_id, mapping in raw.items()
    })


def resolve_media_url(
    exercise: Exercise,
    registry: MediaProviderRegistry,
    preferred: str = AUTO,
    has_premium: bool = False,
) -> str:
    """
    Resolve the demonstration URL for an exercise.

    Order: preferred provider (premium only with entitlement), then premium
    providers if entitled, then free providers, then the default provider.

    Args:
        exercise: Catalog exercise
        registry: Provider registry
        preferred: Provider id or "auto"
        has_premium: Whether the caller is entitled to premium libraries

    Returns:
        URL, or an empty string when no provider has media
    """
    if preferred != AUTO:
        provider = registry.get_provider(preferred)
        if provider is not None and provider.has_media(exercise):
            if provider.is_premium and not has_premium:
                logger.warning(f"Premium library {preferred} requested without access")
                return _resolve_with_fallback(exercise, registry, has_premium=False)
            url = provider.media_url(exercise)
            if url:
                return url

    return _resolve_with_fallback(exercise, registry, has_premium)


def _resolve_with_fallback(exercise: Exercise, registry: MediaProviderRegistry, has_premium: bool) -> str:
    providers = registry.providers()

    if has_premium:
        for provider in providers:
            if provider.is_premium and provider.has_media(exercise):
                url = provider.media_url(exercise)
                if url:
                    return url

    for provider in providers:
        if not provider.is_premium and provider.has_media(exercise):
            url = provider.media_url(exercise)
            if url:
                return url

    url = registry.default_provider.media_url(exercise)
    if not url:
        logger.warning(f"No media available for exercise {exercise.exercise_id}")
        return ""
    return url


def media_sources(exercise: Exercise, registry: MediaProviderRegistry, has_premium: bool = False) -> List[MediaSource]:
    """Every source from every accessible provider, in priority order."""
    sources: List[MediaSource] = []
    for provider in registry.providers():
        if provider.is_premium and not has_premium:
            continue
        if provider.has_media(exercise):
            sources.extend(provider.media_sources(exercise))
    return sources


def available_libraries(registry: MediaProviderRegistry, has_premium: bool = False) -> List[Dict[str, object]]:
    """Library listing with availability for the caller's entitlement."""
    return [
        {
            "id": provider.provider_id,
            "name": provider.name,
            "description": provider.description,
            "available": not provider.is_premium or has_premium,
        }
        for provider in registry.providers()
    ]
