import asyncio
from functools import lru_cache
import logging

from link_summarizer.dispatcher import Summarizer
from link_summarizer.relay import RemoteSummarizer, Relay
from link_summarizer.settings import get_settings

logger = logging.getLogger(__name__)


async def run_async_task(func, *args):
    """Run blocking core code in the default executor so the event loop stays free."""
    return await asyncio.get_running_loop().run_in_executor(None, func, *args)


@lru_cache(maxsize=1)
def get_summarizer() -> Summarizer:
    return Summarizer.from_settings(get_settings())


@lru_cache(maxsize=1)
def get_relay() -> Relay | None:
    """Build the relay, or None when no LINE access token is configured."""
    settings = get_settings()
    if not settings.line_channel_access_token:
        logger.warning("⚠️ LINE_CHANNEL_ACCESS_TOKEN is not set, webhook replies are disabled")
        return None
    summarize = RemoteSummarizer(settings.summarizer_endpoint) if settings.summarizer_endpoint else get_summarizer().handle
    return Relay(summarize=summarize, access_token=settings.line_channel_access_token, reply_url=settings.line_reply_url)
