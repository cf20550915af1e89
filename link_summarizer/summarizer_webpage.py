"""Webpage summarization: scrape the page, then ask the chat model for a synopsis."""

from collections.abc import Callable
from datetime import timedelta
import logging

from .cache import SCRAPE_NAMESPACE, WEBPAGE_NAMESPACE, CacheStore, memoize
from .errors import UnparseableModelOutput
from .llm import ChatClient, last_choice
from .prompts import DEFAULT_LANGUAGE, get_webpage_system_prompt, get_webpage_user_prompt
from .schemas import ParseFailed, Reply, parse_reply
from .scrapper import HtmlFetcher
from .utils import html_to_text, limit_text

logger = logging.getLogger(__name__)


class WebpagePipeline:
    def __init__(
        self,
        cache: CacheStore,
        chat: ChatClient,
        fetch_html: HtmlFetcher,
        ttl: timedelta = timedelta(hours=1),
        context_char_limit: int = 5000,
        language: str = DEFAULT_LANGUAGE,
        to_text: Callable[[str], str] = html_to_text,
    ):
        self.cache = cache
        self.chat = chat
        self.fetch_html = fetch_html
        self.ttl = ttl
        self.context_char_limit = context_char_limit
        self.language = language
        self.to_text = to_text

    def scrape(self, url: str, host: str) -> str:
        """Page text with markup and link targets removed, cached per URL."""
        return memoize(self.cache, SCRAPE_NAMESPACE, url, self.ttl, lambda: self.to_text(self.fetch_html(url, host)))

    def summarize(self, url: str, text: str) -> Reply:
        data = memoize(self.cache, WEBPAGE_NAMESPACE, url, self.ttl, lambda: self._summarize(text).model_dump())
        return Reply.model_validate(data)

    def _summarize(self, text: str) -> Reply:
        context = limit_text(text, self.context_char_limit)
        choices = self.chat.create(get_webpage_system_prompt(self.language), get_webpage_user_prompt(context))

        parsed = parse_reply(last_choice(choices))
        if isinstance(parsed, ParseFailed):
            raise UnparseableModelOutput(parsed.reason)
        return parsed.value

    def run(self, url: str, host: str) -> Reply:
        text = self.scrape(url, host)
        logger.info("Scraped %s characters from %s", len(text), url)
        return self.summarize(url, text)
