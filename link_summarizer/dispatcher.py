"""Entry point of the core: validate, classify, route, and shape the result."""

from collections.abc import Mapping, Sequence
import logging

from .cache import CacheStore, create_cache_store
from .classifier import VIDEO_WHITELIST, classify
from .downloader import AudioFetcher
from .errors import InvalidInput, SummarizerError
from .llm import ChatClient, ChatCompletion
from .schemas import HostKind, Reply, SummarizeResult
from .scrapper import WebpageFetcher
from .settings import AppSettings
from .summarizer_video import VideoPipeline
from .summarizer_webpage import WebpagePipeline
from .transcriber import FalTranscriber
from .utils import parse_host

logger = logging.getLogger(__name__)


class Summarizer:
    """Summarize a webpage or a whitelisted video.

    ``handle`` never raises: it returns ``{ok: true, url, reply}`` or ``{ok: false}``.
    """

    def __init__(
        self,
        webpage: WebpagePipeline,
        video: VideoPipeline,
        whitelist: Mapping[str, Sequence[str]] = VIDEO_WHITELIST,
    ):
        self.webpage = webpage
        self.video = video
        self.whitelist = whitelist

    @classmethod
    def from_settings(
        cls,
        settings: AppSettings,
        cache: CacheStore | None = None,
        chat: ChatClient | None = None,
    ) -> "Summarizer":
        cache = cache or create_cache_store(settings.cache_backend, settings.cache_path)
        chat = chat or ChatCompletion.from_settings(settings)
        webpage = WebpagePipeline(
            cache=cache,
            chat=chat,
            fetch_html=WebpageFetcher(user_agent=settings.user_agent),
            ttl=settings.cache_ttl,
            context_char_limit=settings.context_char_limit,
            language=settings.reply_language,
        )
        video = VideoPipeline(
            cache=cache,
            chat=chat,
            audio_fetcher=AudioFetcher.from_settings(settings),
            speech=FalTranscriber(model=settings.whisper_model),
            ttl=settings.cache_ttl,
            context_char_limit=settings.context_char_limit,
            language=settings.reply_language,
        )
        return cls(webpage=webpage, video=video)

    def route(self, url: str) -> Reply:
        host = parse_host(url)
        if not host:
            raise InvalidInput("URL must be absolute with a host")

        if classify(host, self.whitelist) is HostKind.VIDEO:
            logger.info("🎬 Video URL: %s", url)
            return self.video.run(url)

        logger.info("🌐 Webpage URL: %s", url)
        return self.webpage.run(url, host)

    def handle(self, raw_url: str) -> SummarizeResult:
        try:
            reply = self.route(raw_url)
        except InvalidInput as e:
            logger.warning("⚠️ Rejected input %r: %s", raw_url, e)
            return SummarizeResult.failure()
        except SummarizerError as e:
            logger.error("❌ %s for %s: %s", type(e).__name__, raw_url, e)
            return SummarizeResult.failure()
        except Exception:
            logger.exception("💥 Unexpected failure for %s", raw_url)
            return SummarizeResult.failure()

        return SummarizeResult.success(raw_url, reply)
