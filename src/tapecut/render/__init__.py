"""
Render Engine Module: Offline rendering via ecasound and ffmpeg.

- One scratch directory per render call, always removed
- Per-source transcodes cached within a render
- Mix directives batched at render.batch_size chains per ecasound call
"""

__all__ = ["render"]
