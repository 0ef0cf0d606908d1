# tapecut: non-destructive audio editing over references into sound files
# Package: src.tapecut

import logging

from tapecut.edit.fragment import Fragment
from tapecut.edit.sequence import Sequence
from tapecut.edit.timeline import Timeline, silence
from tapecut.errors import (
    CommandFailed,
    EmptyFragment,
    ErrorKind,
    FileExists,
    MissingDependency,
    OutOfDuration,
    RenderCancelled,
    TapecutError,
    UnknownFormat,
)
from tapecut.probe import probe_duration
from tapecut.render.render import Renderer

__version__ = "1.0.0-dev"
__description__ = "Non-destructive audio editing algebra with ecasound/ffmpeg rendering"

# Module structure:
#   - tapecut.edit     : Fragment, Timeline algebra, step Sequence
#   - tapecut.render   : ecasound/ffmpeg render pipeline
#   - tapecut.probe    : duration probing (mutagen)
#   - tapecut.config   : Configuration management
#   - tapecut.errors   : Error variants

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "CommandFailed",
    "EmptyFragment",
    "ErrorKind",
    "FileExists",
    "Fragment",
    "MissingDependency",
    "OutOfDuration",
    "RenderCancelled",
    "Renderer",
    "Sequence",
    "TapecutError",
    "Timeline",
    "UnknownFormat",
    "probe_duration",
    "silence",
]
