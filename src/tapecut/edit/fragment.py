"""
Fragment: an immutable reference to a range of a source sound file.

Times are kept as integer microsecond ticks so that sums of durations stay
exact across any number of slices and concatenations. Seconds are only used
at the API boundary.
"""

from dataclasses import dataclass, replace
from pathlib import Path
from typing import Union

TICKS_PER_SECOND = 1_000_000


def to_ticks(seconds: float) -> int:
    """Convert seconds to the nearest whole tick."""
    return int(round(seconds * TICKS_PER_SECOND))


def to_seconds(ticks: int) -> float:
    """Convert ticks to seconds."""
    return ticks / TICKS_PER_SECOND


def format_seconds(ticks: int) -> str:
    """
    Render a tick count as a decimal seconds string for command lines.

    >>> format_seconds(1_500_000)
    '1.5'
    >>> format_seconds(0)
    '0'
    """
    whole, frac = divmod(ticks, TICKS_PER_SECOND)
    if not frac:
        return str(whole)
    return f"{whole}.{frac:06d}".rstrip("0")


@dataclass(frozen=True)
class Fragment:
    """A [start, start + duration) range of one source file, optionally played backwards."""

    source: Path
    start_ticks: int
    duration_ticks: int
    reversed: bool = False

    def __post_init__(self):
        if not isinstance(self.source, Path):
            object.__setattr__(self, "source", Path(self.source))
        if self.duration_ticks <= 0:
            raise ValueError(f"Fragment duration must be positive, got {self.duration_ticks} ticks")
        if self.start_ticks < 0:
            raise ValueError(f"Fragment start must be non-negative, got {self.start_ticks} ticks")

    @classmethod
    def whole(cls, source: Union[str, Path], duration: float) -> "Fragment":
        """Fragment covering an entire file of the given duration in seconds."""
        return cls(Path(source), 0, to_ticks(duration))

    @property
    def start(self) -> float:
        return to_seconds(self.start_ticks)

    @property
    def duration(self) -> float:
        return to_seconds(self.duration_ticks)

    @property
    def end(self) -> float:
        return to_seconds(self.start_ticks + self.duration_ticks)

    def sub(self, offset_ticks: int, length_ticks: int) -> "Fragment":
        """Sub-range starting offset_ticks into this fragment, keeping source and direction."""
        return replace(
            self,
            start_ticks=self.start_ticks + offset_ticks,
            duration_ticks=length_ticks,
        )

    def flipped(self) -> "Fragment":
        """Same range with the play direction inverted."""
        return replace(self, reversed=not self.reversed)
