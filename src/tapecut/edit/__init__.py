"""
Editing Module: Fragments, Timelines and the step sequencer.

- Fragments are immutable; times are integer microsecond ticks
- Timeline operators return new Timelines unless named as mutating
  (concat, loop, add_fragment)
- Nothing here touches audio data
"""

__all__ = ["fragment", "timeline", "sequence"]
