"""
Video summarization for whitelisted hosts.

fetch_audio -> transcribe -> chapterize -> format_chapters

The audio artifact path is cached without expiry and downloaded again only
when the file has disappeared. The SRT transcript is written next to the
audio file and reused forever, outside the cache store.
Chapters are cached for one hour under the transcript path.
"""

from collections.abc import Callable
from datetime import timedelta
import logging
import os

from .cache import AUDIO_NAMESPACE, VIDEO_NAMESPACE, CacheStore, cache_key, memoize
from .errors import UnparseableModelOutput
from .llm import ChatClient, last_choice
from .prompts import DEFAULT_LANGUAGE, MAX_CHAPTERS, get_video_system_prompt, get_video_user_prompt
from .schemas import Chapter, ParseFailed, Reply, parse_chapters
from .transcriber import SpeechToText
from .utils import limit_text, sidecar_path, strip_srt_timing

logger = logging.getLogger(__name__)


def format_chapters(chapters: list[Chapter]) -> Reply:
    return Reply(main="\n".join(chapter.to_line() for chapter in chapters), comment=None)


class VideoPipeline:
    def __init__(
        self,
        cache: CacheStore,
        chat: ChatClient,
        audio_fetcher: Callable[[str], str],
        speech: SpeechToText,
        ttl: timedelta = timedelta(hours=1),
        context_char_limit: int = 5000,
        language: str = DEFAULT_LANGUAGE,
    ):
        self.cache = cache
        self.chat = chat
        self.audio_fetcher = audio_fetcher
        self.speech = speech
        self.ttl = ttl
        self.context_char_limit = context_char_limit
        self.language = language

    def fetch_audio(self, url: str) -> str:
        audio_path = memoize(self.cache, AUDIO_NAMESPACE, url, None, lambda: self.audio_fetcher(url))
        if os.path.exists(audio_path):
            return audio_path

        logger.warning("Cached audio %s is gone, downloading %s again", audio_path, url)
        audio_path = self.audio_fetcher(url)
        self.cache.put(cache_key(AUDIO_NAMESPACE, url), audio_path, None)
        return audio_path

    def transcribe(self, audio_path: str) -> str:
        srt_path = sidecar_path(audio_path)
        if os.path.exists(srt_path):
            logger.info("Reusing transcript %s", srt_path)
            with open(srt_path, encoding="utf-8") as f:
                return f.read()

        text = self.speech.transcribe(audio_path)
        with open(srt_path, "w", encoding="utf-8") as f:
            f.write(text)
        return text

    def chapterize(self, srt_path: str, transcript: str) -> list[Chapter]:
        # Keyed by the transcript path rather than the URL.
        data = memoize(
            self.cache,
            VIDEO_NAMESPACE,
            srt_path,
            self.ttl,
            lambda: [chapter.model_dump() for chapter in self._chapterize(transcript)],
        )
        return [Chapter.model_validate(item) for item in data]

    def _chapterize(self, transcript: str) -> list[Chapter]:
        context = limit_text(strip_srt_timing(transcript), self.context_char_limit)
        choices = self.chat.create(get_video_system_prompt(self.language), get_video_user_prompt(context))

        parsed = parse_chapters(last_choice(choices))
        if isinstance(parsed, ParseFailed):
            raise UnparseableModelOutput(parsed.reason)
        return parsed.value[:MAX_CHAPTERS]

    def run(self, url: str) -> Reply:
        audio_path = self.fetch_audio(url)
        transcript = self.transcribe(audio_path)
        chapters = self.chapterize(sidecar_path(audio_path), transcript)
        logger.info("Video %s split into %s chapter(s)", url, len(chapters))
        return format_chapters(chapters)
