"""
Timeline Render Engine.

Turns a Timeline into one audio file by driving external tools:
- ffmpeg transcodes non-intermediate sources once per render (cached by path)
- ecasound extracts each fragment (optionally reversed) into one accumulation file
- mix directives are batched to stay under ecasound's chain limit
- the scratch directory is removed on every exit path
"""

import hashlib
import logging
import shlex
import shutil
import subprocess
import tempfile
import threading
from pathlib import Path
from typing import Dict, List, Optional, Union

from tapecut.config import Config
from tapecut.edit.fragment import Fragment, format_seconds
from tapecut.edit.timeline import Timeline
from tapecut.errors import (
    CommandFailed,
    EmptyFragment,
    FileExists,
    MissingDependency,
    RenderCancelled,
    UnknownFormat,
)
from tapecut.probe import SUPPORTED_FORMATS, Probe, audio_format, probe_duration

logger = logging.getLogger(__name__)

ACCUMULATION_NAME = "tmp"


def cache_key(source: Path) -> str:
    """Deterministic scratch file stem for a transcoded source."""
    return hashlib.md5(str(source).encode("utf-8")).hexdigest()


def mix_directive(
    index: int,
    fragment: Fragment,
    source: Path,
    accumulation: Path,
    position_ticks: int,
) -> List[str]:
    """
    ecasound chain arguments placing one fragment at position_ticks.

    Args:
        index: Chain index within the render
        fragment: Fragment to extract
        source: Intermediate-format file holding the fragment's audio
        accumulation: File the chain writes into
        position_ticks: Output offset of the fragment

    Returns:
        Argument list for one chain
    """
    select = (
        f"select,{format_seconds(fragment.start_ticks)},"
        f"{format_seconds(fragment.duration_ticks)},{source}"
    )
    if fragment.reversed:
        select = "reverse," + select

    return [
        f"-a:{index}",
        f"-i:{select}",
        f"-o:{accumulation}",
        f"-y:{format_seconds(position_ticks)}",
    ]


class Renderer:
    """Offline Timeline renderer built on ecasound and ffmpeg."""

    def __init__(
        self,
        config: Optional[Config] = None,
        *,
        probe: Probe = probe_duration,
        logger: Optional[logging.Logger] = None,
    ):
        """
        Initialize render engine.

        Args:
            config: Configuration (defaults when omitted)
            probe: Duration probe used on the rendered file
            logger: Logger for command tracing (module logger when omitted)
        """
        self.config = config or Config()
        self.probe = probe
        self.logger = logger or logging.getLogger(__name__)

        self.mixer = self.config.get("tools", "mixer")
        self.transcoder = self.config.get("tools", "transcoder")
        self.batch_size = self.config.get("render", "batch_size")
        self.intermediate_format = self.config.get("render", "intermediate_format").lower()

        self._lock = threading.Lock()
        self._process: Optional[subprocess.Popen] = None
        self._cancelled = False

    def render(
        self,
        timeline: Timeline,
        output_path: Union[str, Path],
        overwrite: bool = False,
    ) -> Timeline:
        """
        Render a Timeline to output_path.

        Args:
            timeline: Timeline to render, must not be empty
            output_path: Destination file; its extension selects the format
            overwrite: Replace an existing destination

        Returns:
            Timeline over the rendered file

        Raises:
            EmptyFragment: Timeline has no fragments
            UnknownFormat: Destination extension cannot be probed
            MissingDependency: mixer or transcoder not on PATH
            FileExists: Destination exists and overwrite is False
            CommandFailed: An external command exited non-zero
            RenderCancelled: cancel() was called during the render
        """
        output_path = Path(output_path)

        if not len(timeline):
            raise EmptyFragment("Cannot render a timeline with no fragments")

        if audio_format(output_path) not in SUPPORTED_FORMATS:
            raise UnknownFormat(output_path)

        self._require(self.mixer)
        self._require(self.transcoder)

        if output_path.exists():
            if not overwrite:
                raise FileExists(output_path)
            output_path.unlink()

        with self._lock:
            self._cancelled = False

        scratch_root = self.config.get("render", "scratch_root") or None
        scratch = Path(tempfile.mkdtemp(prefix="tapecut-", dir=scratch_root))
        accumulation = scratch / f"{ACCUMULATION_NAME}.{self.intermediate_format}"

        self.logger.info(
            f"Rendering {len(timeline)} fragments ({timeline.duration:.3f}s) to {output_path}"
        )

        try:
            self._mix(timeline, scratch, accumulation)
            self._finalize(accumulation, output_path)
        finally:
            try:
                shutil.rmtree(scratch)
                self.logger.debug(f"Cleaned up scratch directory: {scratch}")
            except OSError as e:
                self.logger.warning(f"Failed to clean up scratch directory {scratch}: {e}")

        self.logger.info(f"Render complete: {output_path}")
        return Timeline.from_file(output_path, probe=self.probe, logger=self.logger)

    def cancel(self) -> None:
        """Terminate the running command; the render raises RenderCancelled after cleanup."""
        with self._lock:
            self._cancelled = True
            if self._process is not None and self._process.poll() is None:
                self.logger.info("Cancelling render")
                self._process.terminate()

    def _require(self, tool: str) -> None:
        if shutil.which(tool) is None:
            raise MissingDependency(tool)

    def _mix(self, timeline: Timeline, scratch: Path, accumulation: Path) -> None:
        transcoded: Dict[Path, Path] = {}
        command = [self.mixer]
        position = 0

        for index, fragment in enumerate(timeline):
            if index and index % self.batch_size == 0:
                self._run_command(command)
                command = [self.mixer]

            source = self._intermediate_source(fragment.source, scratch, transcoded)
            command.extend(mix_directive(index, fragment, source, accumulation, position))
            position += fragment.duration_ticks

        if len(command) > 1:
            self._run_command(command)

    def _intermediate_source(
        self, source: Path, scratch: Path, transcoded: Dict[Path, Path]
    ) -> Path:
        """Source itself if already intermediate format, else its cached transcode."""
        if audio_format(source) == self.intermediate_format:
            return source

        if source not in transcoded:
            target = scratch / f"{cache_key(source)}.{self.intermediate_format}"
            if not target.exists():
                self._run_command([self.transcoder, "-i", str(source), str(target)])
            transcoded[source] = target

        return transcoded[source]

    def _finalize(self, accumulation: Path, output_path: Path) -> None:
        if audio_format(output_path) == self.intermediate_format:
            shutil.move(str(accumulation), str(output_path))
        else:
            self._run_command([self.transcoder, "-i", str(accumulation), str(output_path)])

    def _run_command(self, args: List[str]) -> str:
        """
        Run one external command to completion.

        Returns:
            Captured stdout

        Raises:
            CommandFailed: Non-zero exit status
            RenderCancelled: cancel() was called before or during the command
        """
        command = shlex.join(args)
        self.logger.debug(f"run_command: {command}")

        with self._lock:
            if self._cancelled:
                raise RenderCancelled(command)
            self._process = subprocess.Popen(
                args,
                stdin=subprocess.DEVNULL,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                text=True,
            )
            process = self._process

        try:
            stdout, stderr = process.communicate()
        finally:
            with self._lock:
                self._process = None

        if stderr:
            self.logger.debug(stderr)

        with self._lock:
            cancelled = self._cancelled
        if cancelled:
            raise RenderCancelled(command)

        if process.returncode != 0:
            self.logger.error(f"Command failed with return code {process.returncode}: {command}")
            raise CommandFailed(command, process.returncode, stderr or "")

        return stdout
