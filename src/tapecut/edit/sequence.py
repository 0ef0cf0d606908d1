"""
Step sequencer: build a Timeline from a pattern of symbols.

Each symbol in the pattern becomes exactly one step of output. A symbol
found in the palette plays its Timeline cut or padded with silence to the
step length; any other symbol is a silent step.

Examples:
    >>> kick = Timeline.from_file("kick.wav")  # doctest: +SKIP
    >>> snare = Timeline.from_file("snare.wav")  # doctest: +SKIP
    >>> beat = Sequence("k-s-k-s-", 0.25).apply({"k": kick, "s": snare})  # doctest: +SKIP
"""

import functools
import logging
from typing import Callable, Hashable, Iterable, Mapping, Optional

from tapecut.edit.fragment import to_seconds, to_ticks
from tapecut.edit.timeline import Timeline, silence as default_silence

logger = logging.getLogger(__name__)


class Sequence:
    """A pattern of symbols played at a fixed duration per step."""

    def __init__(
        self,
        pattern: Iterable[Hashable],
        step_duration: float,
        *,
        silence: Optional[Callable[[float], Timeline]] = None,
        logger: Optional[logging.Logger] = None,
    ):
        """
        Args:
            pattern: Symbols in playback order (a string is one symbol per character)
            step_duration: Seconds per step, must be positive
            silence: Factory for silent Timelines (defaults to the bundled clip)
            logger: Logger for the output Timeline (module logger when omitted)
        """
        if to_ticks(step_duration) <= 0:
            raise ValueError(f"Step duration must be positive, got {step_duration}")

        self.pattern = list(pattern)
        self.step_duration = step_duration
        self.logger = logger or logging.getLogger(__name__)
        self._silence = silence or functools.partial(default_silence, logger=self.logger)

    def _step(self, timeline: Optional[Timeline]) -> Timeline:
        if timeline is None:
            return self._silence(self.step_duration)

        step_ticks = to_ticks(self.step_duration)
        if timeline.duration_ticks >= step_ticks:
            return timeline.slice(0, self.step_duration)

        gap_ticks = step_ticks - timeline.duration_ticks
        return timeline + self._silence(to_seconds(gap_ticks))

    def apply(self, palette: Mapping[Hashable, Timeline]) -> Timeline:
        """
        Render the pattern against a palette of symbol -> Timeline.

        Returns:
            New Timeline lasting len(pattern) * step_duration
        """
        result = Timeline(logger=self.logger)
        for symbol in self.pattern:
            result.concat(self._step(palette.get(symbol)))

        self.logger.debug(
            f"Sequenced {len(self.pattern)} steps into {len(result)} fragments"
        )
        return result

    def __repr__(self) -> str:
        return f"Sequence(steps={len(self.pattern)}, step_duration={self.step_duration})"
