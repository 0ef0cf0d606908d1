"""
Timeline: an ordered sequence of fragments and the editing algebra over it.

Operators return new Timelines and leave their operands untouched, except
for the receiver-mutating ones, which say so in their names and docstrings:

- concat(other): append other's fragments in place
- loop(count):   repeat own fragments in place
- add_fragment(fragment)

The pure counterparts are `a + b` and `a * count`.

Examples:
    >>> song = Timeline.from_file("song.mp3")  # doctest: +SKIP
    >>> intro = song.slice(0, 4.5)  # doctest: +SKIP
    >>> beat = song[10:12].fill(30)  # doctest: +SKIP
    >>> (intro + beat.reverse()).to_file("out.mp3")  # doctest: +SKIP
"""

import functools
import logging
from pathlib import Path
from typing import Iterable, Iterator, List, Optional, Union

from tapecut.config import Config
from tapecut.edit.fragment import Fragment, to_seconds, to_ticks
from tapecut.errors import EmptyFragment, OutOfDuration
from tapecut.probe import Probe, probe_duration

logger = logging.getLogger(__name__)

SILENCE_PATH = Path(__file__).resolve().parent.parent / "data" / "silence.wav"


class Timeline:
    """Ordered fragments; duration is always the exact sum of fragment durations."""

    def __init__(
        self,
        fragments: Iterable[Fragment] = (),
        *,
        logger: Optional[logging.Logger] = None,
    ):
        self._fragments: List[Fragment] = list(fragments)
        self.logger = logger or logging.getLogger(__name__)

    @classmethod
    def from_file(
        cls,
        path: Union[str, Path],
        *,
        probe: Probe = probe_duration,
        logger: Optional[logging.Logger] = None,
    ) -> "Timeline":
        """Timeline holding one fragment that spans the whole file."""
        path = Path(path)
        return cls([Fragment.whole(path, probe(path))], logger=logger)

    @classmethod
    def silence(
        cls,
        duration: float,
        *,
        config: Optional[Config] = None,
        logger: Optional[logging.Logger] = None,
    ) -> "Timeline":
        """
        Timeline of the given number of seconds of silence.

        Built by repeating a short slice of the bundled silent clip.
        """
        config = config or Config()
        unit = _silence_unit(config.get("silence", "base_unit_seconds"))
        return cls([unit], logger=logger).fill(duration)

    def _derive(self, fragments: Iterable[Fragment] = ()) -> "Timeline":
        return type(self)(fragments, logger=self.logger)

    @property
    def fragments(self) -> tuple:
        return tuple(self._fragments)

    @property
    def duration_ticks(self) -> int:
        return sum(fragment.duration_ticks for fragment in self._fragments)

    @property
    def duration(self) -> float:
        """Total duration in seconds."""
        return to_seconds(self.duration_ticks)

    def __len__(self) -> int:
        return len(self._fragments)

    def __iter__(self) -> Iterator[Fragment]:
        return iter(self.fragments)

    def __eq__(self, other) -> bool:
        if not isinstance(other, Timeline):
            return NotImplemented
        return self._fragments == other._fragments

    __hash__ = None

    def __repr__(self) -> str:
        return f"Timeline(fragments={len(self._fragments)}, duration={self.duration:.3f}s)"

    # Mutating operators

    def add_fragment(self, fragment: Fragment) -> "Timeline":
        """Append one fragment in place. Returns self."""
        self._fragments.append(fragment)
        return self

    def concat(self, other: "Timeline") -> "Timeline":
        """Append other's fragments to this Timeline in place. Returns self."""
        self._fragments.extend(other.fragments)
        return self

    def loop(self, count: int) -> "Timeline":
        """
        Repeat this Timeline's current fragments in place so it plays count times.

        Returns self. count=1 leaves the Timeline unchanged.
        """
        if count < 1:
            raise ValueError(f"Loop count must be at least 1, got {count}")
        original = list(self._fragments)
        for _ in range(count - 1):
            self._fragments.extend(original)
        return self

    # Pure operators

    def __add__(self, other: "Timeline") -> "Timeline":
        if not isinstance(other, Timeline):
            return NotImplemented
        return self._derive(self._fragments + other._fragments)

    def __mul__(self, count: int) -> "Timeline":
        return self._derive(self._fragments).loop(count)

    def __truediv__(self, count: int) -> List["Timeline"]:
        return self.split(count)

    def __getitem__(self, key: slice) -> "Timeline":
        """
        Slice by seconds: t[2.5:4] is t.slice(2.5, 1.5).

        Open bounds mean the start or end of the Timeline.
        """
        if not isinstance(key, slice):
            raise TypeError(f"Timeline indices must be slices, not {type(key).__name__}")
        if key.step is not None:
            raise ValueError("Step is not supported for timeline slicing")

        start = to_ticks(key.start) if key.start is not None else 0
        stop = to_ticks(key.stop) if key.stop is not None else self.duration_ticks
        return self._slice_ticks(start, stop - start)

    def slice(self, start: float, length: float) -> "Timeline":
        """
        New Timeline covering [start, start + length) seconds of this one.

        Raises:
            OutOfDuration: If the range is negative or runs past the end
        """
        return self._slice_ticks(to_ticks(start), to_ticks(length))

    def _slice_ticks(self, start: int, length: int) -> "Timeline":
        total = self.duration_ticks
        if start < 0 or length < 0 or start + length > total:
            raise OutOfDuration(to_seconds(start + length), to_seconds(total))

        result = self._derive()
        remain = length
        if remain == 0:
            return result

        for fragment in self._fragments:
            if start >= fragment.duration_ticks:
                start -= fragment.duration_ticks
                continue

            if start + remain <= fragment.duration_ticks:
                result.add_fragment(fragment.sub(start, remain))
                break

            taken = fragment.duration_ticks - start
            result.add_fragment(fragment.sub(start, taken))
            remain -= taken
            start = 0

        return result

    def split(self, count: int) -> List["Timeline"]:
        """
        Cut into count consecutive pieces of (nearly) equal length.

        Piece boundaries fall on whole ticks, so pieces may differ from
        duration / count by one tick while still adding up exactly.
        """
        if count < 1:
            raise ValueError(f"Split count must be at least 1, got {count}")

        total = self.duration_ticks
        bounds = [i * total // count for i in range(count + 1)]
        return [
            self._slice_ticks(begin, end - begin)
            for begin, end in zip(bounds, bounds[1:])
        ]

    def fill(self, duration: float) -> "Timeline":
        """
        Repeat this Timeline, cutting the last repetition short, to exactly duration seconds.

        Raises:
            EmptyFragment: If this Timeline has no fragments
            ValueError: If duration is negative
        """
        if not self._fragments:
            raise EmptyFragment("Cannot fill from a timeline with no fragments")

        own = self.duration_ticks
        remain = to_ticks(duration)
        if remain < 0:
            raise ValueError(f"Fill duration must be non-negative, got {duration}")
        result = self._derive()

        while remain >= own:
            result.concat(self)
            remain -= own

        if remain > 0:
            result.concat(self._slice_ticks(0, remain))

        self.logger.debug(f"fill: {len(result)} fragments for {duration}s")
        return result

    def replace(self, start: float, length: float, replacement: "Timeline") -> "Timeline":
        """
        New Timeline with [start, start + length) swapped for replacement.

        Raises:
            OutOfDuration: If the replaced range is negative or runs past the end
        """
        start_ticks = to_ticks(start)
        length_ticks = to_ticks(length)
        offset = start_ticks + length_ticks
        total = self.duration_ticks

        if start_ticks < 0 or length_ticks < 0 or offset > total:
            raise OutOfDuration(to_seconds(offset), to_seconds(total))

        result = self._derive()
        if start_ticks > 0:
            result.concat(self._slice_ticks(0, start_ticks))
        result.concat(replacement)
        result.concat(self._slice_ticks(offset, total - offset))
        return result

    def reverse(self) -> "Timeline":
        """New Timeline played backwards: order reversed, every fragment flipped."""
        return self._derive(fragment.flipped() for fragment in reversed(self._fragments))

    def to_file(
        self,
        output_path: Union[str, Path],
        *,
        overwrite: bool = False,
        renderer=None,
    ) -> "Timeline":
        """
        Render this Timeline to an audio file.

        Returns:
            Timeline over the rendered file
        """
        if renderer is None:
            from tapecut.render.render import Renderer

            renderer = Renderer(logger=self.logger)
        return renderer.render(self, output_path, overwrite=overwrite)


@functools.lru_cache(maxsize=None)
def _silence_unit(base_unit_seconds: float) -> Fragment:
    unit = Timeline.from_file(SILENCE_PATH).slice(0, base_unit_seconds)
    return unit.fragments[0]


def silence(
    duration: float,
    config: Optional[Config] = None,
    *,
    logger: Optional[logging.Logger] = None,
) -> Timeline:
    """Seconds of silence; see Timeline.silence."""
    return Timeline.silence(duration, config=config, logger=logger)
