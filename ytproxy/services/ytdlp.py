from typing import Any, AsyncGenerator, Dict, List, Optional, NamedTuple
from collections import deque
import re
from contextlib import suppress
import asyncio
import json
import logging
from ytproxy.config.settings import YtDlpConfig, config
from ytproxy.core.errors import ErrorKind, ExtractionError
from ytproxy.models.internal import SourceFormat, VideoMetadata

logger = logging.getLogger(__name__)

STDERR_MAX_LINES = 50
LEADING_ITAG = re.compile(r"\d+")

# Checked in order; the first matching group wins.
STDERR_MARKERS = (
    (ErrorKind.NOT_FOUND, (
        "unsupported url", "video unavailable", "is not a valid url",
        "private video", "does not exist", "http error 404", "requested format is not available",
    )),
    (ErrorKind.NETWORK, (
        "unable to download", "http error", "urlopen error", "timed out",
        "connection", "network is unreachable", "name or service not known",
    )),
    (ErrorKind.PARSE, (
        "unable to extract", "failed to parse", "jsondecodeerror", "unable to decode",
    )),
)

class CompletedProcess(NamedTuple):
    """Subprocess result"""
    returncode: int
    stdout: bytes
    stderr: bytes

class SubprocessExecutor:
    """Execute subprocess with consistent error handling"""

    @staticmethod
    async def run(
        cmd: List[str],
        timeout: Optional[float] = None,
        capture_stderr: bool = True
    ) -> CompletedProcess:
        """
        Run subprocess with optional timeout and proper cleanup.
        Prevents process leaks and ensures consistent error handling.
        """
        process = await asyncio.create_subprocess_exec(
            *cmd,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE if capture_stderr else asyncio.subprocess.DEVNULL,
            stdin=asyncio.subprocess.DEVNULL
        )

        try:
            stdout, stderr = await asyncio.wait_for(
                process.communicate(),
                timeout=timeout
            )

            return CompletedProcess(
                returncode=process.returncode,
                stdout=stdout,
                stderr=stderr if capture_stderr else b""
            )

        except asyncio.TimeoutError:
            process.kill()
            await process.wait()
            raise
        except BaseException:
            if process.returncode is None:
                process.kill()
                await process.wait()
            raise

class YTDLPCommandBuilder:
    """Build yt-dlp commands"""

    def __init__(self, settings: YtDlpConfig):
        self.settings = settings

    def _common(self) -> List[str]:
        cmd = [
            self.settings.binary,
            '--no-playlist',
            '--socket-timeout', str(self.settings.socket_timeout),
        ]
        if self.settings.js_runtime:
            cmd.extend(['--js-runtimes', self.settings.js_runtime])
        return cmd

    def build_version_command(self) -> List[str]:
        return [self.settings.binary, '--version']

    def build_info_command(self, url: str) -> List[str]:
        """Build command for fetching video info"""
        cmd = self._common()
        cmd.append('--dump-json')
        # "--" keeps urls starting with "-" from being read as options
        cmd.extend(['--', url])
        return cmd

    def build_stream_command(self, url: str, format_id: str) -> List[str]:
        """Build command writing exactly one format to stdout"""
        cmd = self._common()
        cmd.extend([
            '-f', format_id,
            '-o', '-',
            # NOTE: Do NOT use --print here as it mixes with binary output in stdout
            '--no-progress',
            '--quiet',
            '--no-part',
        ])
        cmd.extend(['--', url])
        return cmd

def classify_stderr(stderr: str) -> ErrorKind:
    """Map yt-dlp error output to an ErrorKind"""
    lowered = stderr.lower()
    for kind, markers in STDERR_MARKERS:
        if any(marker in lowered for marker in markers):
            return kind
    return ErrorKind.UNKNOWN

def _has_codec(codec: Optional[str]) -> bool:
    return bool(codec) and codec != "none"

def parse_format(raw: Dict[str, Any]) -> Optional[SourceFormat]:
    """
    Map one yt-dlp format dict; None for entries not led by a numeric itag.
    Suffixed ids such as 140-1 (dubbed track) or 251-drc keep their leading itag.
    """
    format_id = str(raw.get("format_id") or "")
    match = LEADING_ITAG.match(format_id)
    if match is None:
        return None

    vcodec = raw.get("vcodec")
    acodec = raw.get("acodec")
    has_video = _has_codec(vcodec)
    has_audio = _has_codec(acodec)
    width = raw.get("width")
    height = raw.get("height")
    ext = raw.get("ext")

    quality_label = None
    if has_video and height:
        fps = raw.get("fps")
        quality_label = f"{height}p"
        if fps and fps > 30:
            quality_label += str(round(fps))

    if width and height:
        resolution = f"{width}x{height}"
    else:
        resolution = raw.get("resolution")
        if resolution == "audio only":
            resolution = None

    mime_type = f"{'video' if has_video else 'audio'}/{ext or 'unknown'}"
    codecs = [c for c in (vcodec, acodec) if _has_codec(c)]
    if codecs:
        mime_type += f'; codecs="{", ".join(codecs)}"'

    return SourceFormat(
        itag=int(match.group()),
        format_id=format_id,
        quality_label=quality_label,
        has_audio=has_audio,
        has_video=has_video,
        resolution=resolution,
        mime_type=mime_type,
        container=ext,
    )

def parse_info(info: Dict[str, Any]) -> VideoMetadata:
    """Map yt-dlp --dump-json output, keeping format order"""
    formats = []
    for raw in info.get("formats") or []:
        parsed = parse_format(raw)
        if parsed is not None:
            formats.append(parsed)
    return VideoMetadata(title=info.get("title") or "video", formats=formats)

class YtDlpExtractor:
    """Extractor backed by the yt-dlp command line program"""

    def __init__(self, settings: Optional[YtDlpConfig] = None, chunk_size: Optional[int] = None):
        self.settings = settings or config.ytdlp
        self.chunk_size = chunk_size or config.stream.chunk_size
        self.commands = YTDLPCommandBuilder(self.settings)

    async def version(self) -> str:
        result = await SubprocessExecutor.run(self.commands.build_version_command(), timeout=10.0)
        return result.stdout.decode().strip() or "unknown"

    async def fetch_info(self, url: str) -> VideoMetadata:
        cmd = self.commands.build_info_command(url)
        try:
            result = await SubprocessExecutor.run(cmd, timeout=self.settings.info_timeout)
        except asyncio.TimeoutError:
            raise ExtractionError(ErrorKind.NETWORK, f"yt-dlp timed out after {self.settings.info_timeout}s")
        except OSError as e:
            raise ExtractionError(ErrorKind.UNKNOWN, f"Cannot run {self.settings.binary}: {e}") from e

        if result.returncode != 0:
            error_msg = result.stderr.decode(errors="replace").strip()
            raise ExtractionError(classify_stderr(error_msg), error_msg[:200])

        try:
            # --dump-json prints one document per line; --no-playlist leaves one
            first_line = result.stdout.decode().strip().splitlines()[0]
            info = json.loads(first_line)
        except (IndexError, UnicodeDecodeError, json.JSONDecodeError) as e:
            raise ExtractionError(ErrorKind.PARSE, f"Unreadable yt-dlp output: {e}") from e

        return parse_info(info)

    async def open_stream(self, url: str, fmt: SourceFormat) -> AsyncGenerator[bytes, None]:
        cmd = self.commands.build_stream_command(url, fmt.format_id or str(fmt.itag))
        try:
            process = await asyncio.create_subprocess_exec(
                *cmd,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
                stdin=asyncio.subprocess.DEVNULL
            )
        except OSError as e:
            raise ExtractionError(ErrorKind.UNKNOWN, f"Cannot run {self.settings.binary}: {e}") from e
        return self._relay(process)

    async def _relay(self, process: asyncio.subprocess.Process) -> AsyncGenerator[bytes, None]:
        stderr_lines: deque = deque(maxlen=STDERR_MAX_LINES)

        async def drain_stderr():
            """Drain stderr to prevent buffer deadlock"""
            while True:
                line = await process.stderr.readline()
                if not line:
                    break
                stderr_lines.append(line.decode(errors="replace").strip())

        stderr_task = asyncio.create_task(drain_stderr())

        try:
            while True:
                chunk = await process.stdout.read(self.chunk_size)
                if not chunk:
                    break
                yield chunk

            returncode = await process.wait()
            if returncode != 0:
                await stderr_task
                error_summary = '\n'.join(stderr_lines)
                raise ExtractionError(classify_stderr(error_summary), f"yt-dlp exited with {returncode}: {error_summary[:200]}")
        finally:
            if process.returncode is None:
                process.kill()
                await process.wait()
                logger.debug("Killed yt-dlp stream process %s", process.pid)
            stderr_task.cancel()
            with suppress(asyncio.CancelledError):
                await stderr_task
