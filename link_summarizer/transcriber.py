"""
This module handles speech-to-text. Audio files are uploaded to FAL, transcribed
with Whisper, and the timestamped chunks are rendered as SRT subtitles.
"""

import logging
import os
from typing import Any, Protocol

import fal_client

from .errors import ExternalServiceFailure

logger = logging.getLogger(__name__)


class SpeechToText(Protocol):
    def transcribe(self, audio_path: str) -> str: ...


def format_timestamp(seconds: float) -> str:
    """Format seconds as an SRT timestamp (HH:MM:SS,mmm)."""
    millis = max(0, round(seconds * 1000))
    hours, millis = divmod(millis, 3_600_000)
    minutes, millis = divmod(millis, 60_000)
    secs, millis = divmod(millis, 1000)
    return f"{hours:02d}:{minutes:02d}:{secs:02d},{millis:03d}"


def chunks_to_srt(chunks: list[dict[str, Any]]) -> str:
    """Render Whisper chunks (``{"timestamp": [start, end], "text": ...}``) as SRT."""
    blocks = []
    for chunk in chunks:
        text = (chunk.get("text") or "").strip()
        if not text:
            continue
        start, end = (list(chunk.get("timestamp") or []) + [None, None])[:2]
        start = start or 0.0
        end = end if end is not None else start
        blocks.append(f"{len(blocks) + 1}\n{format_timestamp(start)} --> {format_timestamp(end)}\n{text}\n")
    return "\n".join(blocks)


class FalTranscriber:
    """Transcribes audio files with the FAL-hosted Whisper model."""

    def __init__(self, model: str = "fal-ai/whisper"):
        self.model = model

    def transcribe(self, audio_path: str) -> str:
        if not os.getenv("FAL_KEY"):
            raise ExternalServiceFailure("FAL_KEY not configured")

        try:
            logger.info("📤 Uploading %s to FAL...", audio_path)
            url = fal_client.upload_file(audio_path)

            def on_queue_update(update):
                if isinstance(update, fal_client.InProgress):
                    for log_entry in update.logs:
                        logger.info("FAL: %s", log_entry["message"])

            result = fal_client.subscribe(
                self.model,
                arguments={
                    "audio_url": url,
                    "task": "transcribe",
                    "chunk_level": "segment",
                },
                with_logs=True,
                on_queue_update=on_queue_update,
            )
        except Exception as e:
            raise ExternalServiceFailure(f"FAL transcription failed: {e}") from e

        srt = chunks_to_srt(result.get("chunks") or []) if isinstance(result, dict) else ""
        if not srt:
            raise ExternalServiceFailure("FAL transcription returned no segments")

        logger.info("📝 Transcription result: %s characters", len(srt))
        return srt
