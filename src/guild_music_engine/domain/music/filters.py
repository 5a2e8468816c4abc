"""Audio filter chain for the music bounded context.

Filters are toggled as a set that remembers insertion order, but the FFmpeg
pipeline always applies them in the order the ``AudioFilter`` members are
declared. Presets replace the whole set.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict

from guild_music_engine.domain.shared.exceptions import ValidationError
from guild_music_engine.domain.shared.messages import ErrorMessages


class AudioFilter(Enum):
    """Named audio transforms. Declaration order is the pipeline order."""

    BASSBOOST = "bassboost"
    NIGHTCORE = "nightcore"
    VAPORWAVE = "vaporwave"
    EIGHT_D = "8d"
    KARAOKE = "karaoke"
    TREMOLO = "tremolo"
    VIBRATO = "vibrato"
    REVERSE = "reverse"

    @property
    def ffmpeg_expression(self) -> str:
        return _FFMPEG_EXPRESSIONS[self]

    @property
    def rank(self) -> int:
        return _PIPELINE_ORDER[self]

    @classmethod
    def parse(cls, name: str | AudioFilter) -> AudioFilter:
        if isinstance(name, AudioFilter):
            return name
        try:
            return cls(name.strip().lower())
        except ValueError:
            raise ValidationError(ErrorMessages.UNKNOWN_FILTER.format(name=name), field="filter")


_FFMPEG_EXPRESSIONS: dict[AudioFilter, str] = {
    AudioFilter.BASSBOOST: "bass=g=20,dynaudnorm=f=200",
    AudioFilter.NIGHTCORE: "aresample=48000,asetrate=48000*1.25",
    AudioFilter.VAPORWAVE: "aresample=48000,asetrate=48000*0.8",
    AudioFilter.EIGHT_D: "apulsator=hz=0.125",
    AudioFilter.KARAOKE: "pan=mono|c0=0.5*c0+-0.5*c1|c1=0.5*c1+-0.5*c0",
    AudioFilter.TREMOLO: "tremolo",
    AudioFilter.VIBRATO: "vibrato=f=6.5",
    AudioFilter.REVERSE: "areverse",
}

_PIPELINE_ORDER: dict[AudioFilter, int] = {f: i for i, f in enumerate(AudioFilter)}


class FilterPreset(Enum):
    """Named fixed filter sets, substituted wholesale for the current set."""

    PARTY = "party"
    CHILL = "chill"
    GAMING = "gaming"

    @property
    def filters(self) -> tuple[AudioFilter, ...]:
        return _PRESETS[self]

    @classmethod
    def parse(cls, name: str | FilterPreset) -> FilterPreset:
        if isinstance(name, FilterPreset):
            return name
        try:
            return cls(name.strip().lower())
        except ValueError:
            raise ValidationError(ErrorMessages.UNKNOWN_PRESET.format(name=name), field="preset")


_PRESETS: dict[FilterPreset, tuple[AudioFilter, ...]] = {
    FilterPreset.PARTY: (AudioFilter.BASSBOOST, AudioFilter.NIGHTCORE),
    FilterPreset.CHILL: (AudioFilter.VAPORWAVE,),
    FilterPreset.GAMING: (AudioFilter.BASSBOOST, AudioFilter.EIGHT_D),
}


class FilterChain(BaseModel):
    """Immutable insertion-ordered set of active filters."""

    model_config = ConfigDict(frozen=True, strict=True)

    filters: tuple[AudioFilter, ...] = ()

    @classmethod
    def from_preset(cls, preset: FilterPreset) -> FilterChain:
        return cls(filters=preset.filters)

    def __contains__(self, item: object) -> bool:
        return item in self.filters

    def __len__(self) -> int:
        return len(self.filters)

    def __bool__(self) -> bool:
        return bool(self.filters)

    @property
    def names(self) -> tuple[str, ...]:
        """Filter names in the order they were enabled."""
        return tuple(f.value for f in self.filters)

    @property
    def pipeline(self) -> tuple[AudioFilter, ...]:
        """Filters in fixed application order, regardless of toggle order."""
        return tuple(sorted(self.filters, key=lambda f: f.rank))

    @property
    def ffmpeg_expression(self) -> str | None:
        if not self.filters:
            return None
        return ",".join(f.ffmpeg_expression for f in self.pipeline)

    def toggled(self, audio_filter: AudioFilter) -> FilterChain:
        """Return a chain with *audio_filter* flipped. Toggling twice is the identity."""
        if audio_filter in self.filters:
            return FilterChain(filters=tuple(f for f in self.filters if f is not audio_filter))
        return FilterChain(filters=(*self.filters, audio_filter))

    def cleared(self) -> FilterChain:
        return FilterChain()
