"""
Audio acquisition for whitelisted video hosts.

1. yt-dlp downloads a single audio-only format into a uuid-named file.
2. ffmpeg caps the duration, strips video and re-encodes to low-bitrate opus.

Both tools run as subprocesses under a fixed timeout. A timeout counts as a
tool failure. Partial files are removed on every failure path.
"""

from collections.abc import Callable
import contextlib
import logging
import os
import subprocess
import sys
import uuid

from .errors import ExternalToolFailure
from .settings import AppSettings, DEFAULT_USER_AGENT

logger = logging.getLogger(__name__)

YT_DLP = [sys.executable, "-m", "yt_dlp"]
FFMPEG = ["ffmpeg"]

ToolRunner = Callable[[list[str], str, float], bool]


def run_tool(args: list[str], cwd: str, timeout: float) -> bool:
    """Run an external tool quietly. Returns True only on a zero exit within ``timeout``."""
    try:
        completed = subprocess.run(  # noqa: S603
            args,
            cwd=cwd,
            timeout=timeout,
            stdin=subprocess.DEVNULL,
            stdout=subprocess.DEVNULL,
            stderr=subprocess.DEVNULL,
            check=False,
        )
    except subprocess.TimeoutExpired:
        logger.warning("%s timed out after %ss", args[0], timeout)
        return False
    except OSError as e:
        logger.error("Failed to start %s: %s", args[0], e)
        return False

    if completed.returncode != 0:
        logger.warning("%s exited with %s", args[0], completed.returncode)
    return completed.returncode == 0


def remove_quietly(path: str) -> None:
    with contextlib.suppress(OSError):
        os.remove(path)


class AudioFetcher:
    """Download a video's audio track and transcode it to opus."""

    def __init__(
        self,
        storage_dir: str,
        runner: ToolRunner = run_tool,
        timeout: float = 10.0,
        user_agent: str = DEFAULT_USER_AGENT,
        format_id: str = "140",
        max_duration: str = "00:15:00",
        bitrate: str = "64k",
    ):
        self.storage_dir = storage_dir
        self.runner = runner
        self.timeout = timeout
        self.user_agent = user_agent
        self.format_id = format_id
        self.max_duration = max_duration
        self.bitrate = bitrate

    @classmethod
    def from_settings(cls, settings: AppSettings, runner: ToolRunner = run_tool) -> "AudioFetcher":
        return cls(
            storage_dir=settings.storage_dir,
            runner=runner,
            timeout=settings.tool_timeout_seconds,
            user_agent=settings.user_agent,
            format_id=settings.audio_format_id,
            max_duration=settings.max_audio_duration,
            bitrate=settings.audio_bitrate,
        )

    def download_args(self, url: str, filename: str) -> list[str]:
        return [
            *YT_DLP,
            "--abort-on-error",
            "--no-playlist",
            "--no-part",
            "--format",
            self.format_id,
            "--user-agent",
            self.user_agent,
            "--output",
            filename,
            url,
        ]

    def transcode_args(self, filename: str, audio_filename: str) -> list[str]:
        return [
            *FFMPEG,
            "-i",
            filename,
            "-t",
            self.max_duration,
            "-vn",
            "-c:a",
            "libopus",
            "-b:a",
            self.bitrate,
            audio_filename,
        ]

    def __call__(self, url: str) -> str:
        """Return the path of the transcoded audio artifact for ``url``."""
        os.makedirs(self.storage_dir, exist_ok=True)

        filename = uuid.uuid4().hex
        audio_filename = f"{filename}.webm"
        download_path = os.path.join(self.storage_dir, filename)
        audio_path = os.path.join(self.storage_dir, audio_filename)

        logger.info("Downloading audio for: %s", url)
        if not self.runner(self.download_args(url, filename), self.storage_dir, self.timeout):
            remove_quietly(download_path)
            raise ExternalToolFailure(f"Download failed for {url}")

        logger.info("Transcoding %s", download_path)
        transcoded = self.runner(self.transcode_args(filename, audio_filename), self.storage_dir, self.timeout)
        remove_quietly(download_path)

        if not transcoded:
            remove_quietly(audio_path)
            raise ExternalToolFailure(f"Transcoding failed for {url}")

        logger.info("Audio ready at %s", audio_path)
        return audio_path
