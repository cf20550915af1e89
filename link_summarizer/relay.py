"""LINE webhook relay: verify, pick the first URL, summarize, reply.

The relay only ever sees the summarizer through ``summarize(url) -> SummarizeResult``,
either in-process or over HTTP via ``RemoteSummarizer``.
"""

import base64
from collections.abc import Callable, Iterable
import hashlib
import hmac
import logging
import re
from urllib.parse import parse_qsl, quote, unquote, urlencode, urlsplit, urlunsplit

import httpx
from pydantic import BaseModel, ConfigDict, Field

from .schemas import Reply, SummarizeResult

logger = logging.getLogger(__name__)

SIGNATURE_HEADER = "x-line-signature"
LINE_REPLY_URL = "https://api.line.me/v2/bot/message/reply"
URL_PATTERN = re.compile(r"https://(?:[\w-]+\.)+[a-z]{2,6}(?:/[^/\s]+)+", re.IGNORECASE)
DEFAULT_TIMEOUT_S = 30
PATH_SAFE_CHARS = "/:@!$&'()*+,;=~"

SummarizeFn = Callable[[str], SummarizeResult]


class Message(BaseModel):
    model_config = ConfigDict(extra="ignore")

    type: str
    text: str | None = None


class WebhookEvent(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    type: str
    reply_token: str | None = Field(default=None, alias="replyToken")
    message: Message | None = None


class WebhookPayload(BaseModel):
    model_config = ConfigDict(extra="ignore")

    events: list[WebhookEvent] = Field(default_factory=list)


def sign(body: bytes, secret: str) -> str:
    digest = hmac.new(secret.encode("utf-8"), body, hashlib.sha256).digest()
    return base64.b64encode(digest).decode("ascii")


def verify_signature(body: bytes, signature: str | None, secret: str | None) -> bool:
    """Check the base64 HMAC-SHA256 of the raw body against the signature header."""
    if not signature or not secret:
        return False
    return hmac.compare_digest(sign(body, secret), signature)


def extract_urls(text: str) -> list[str]:
    return URL_PATTERN.findall(text or "")


def canonicalize_url(url: str) -> str | None:
    """Percent-decode, drop the fragment and sort query parameters by name."""
    try:
        parts = urlsplit(unquote(url).strip())
    except ValueError:
        return None
    if not parts.scheme or not parts.netloc:
        return None

    params = sorted(parse_qsl(parts.query, keep_blank_values=True), key=lambda item: item[0])
    path = quote(parts.path, safe=PATH_SAFE_CHARS)
    return urlunsplit((parts.scheme, parts.netloc, path, urlencode(params), ""))


def format_reply(url: str, reply: Reply) -> str:
    return f"{url}\n---\n{reply.main}\n\n{reply.comment or ''}".strip()


class RemoteSummarizer:
    """Calls a summarizer deployed elsewhere: ``GET {endpoint}/?url=...``."""

    def __init__(self, endpoint: str, client: httpx.Client | None = None):
        self.endpoint = endpoint.rstrip("/")
        self.client = client or httpx.Client(timeout=None)

    def __call__(self, url: str) -> SummarizeResult:
        try:
            response = self.client.get(f"{self.endpoint}/", params={"url": url})
            response.raise_for_status()
            return SummarizeResult.model_validate(response.json())
        except (httpx.HTTPError, ValueError) as exc:
            logger.warning("Summarizer endpoint failed for %s: %s", url, exc)
            return SummarizeResult.failure()


class Relay:
    def __init__(
        self,
        summarize: SummarizeFn,
        access_token: str,
        reply_url: str = LINE_REPLY_URL,
        client: httpx.Client | None = None,
    ):
        self.summarize = summarize
        self.access_token = access_token
        self.reply_url = reply_url
        self.client = client or httpx.Client(timeout=DEFAULT_TIMEOUT_S)

    def handle_events(self, events: Iterable[WebhookEvent]) -> None:
        for event in events:
            try:
                self.handle_event(event)
            except Exception:
                logger.exception("Webhook event failed")

    def handle_event(self, event: WebhookEvent) -> bool:
        """Reply to a text message that contains a URL. Returns True when a reply was sent."""
        if event.type != "message" or event.message is None or event.message.type != "text":
            return False
        if not event.reply_token:
            return False

        urls = extract_urls(event.message.text or "")
        if not urls:
            return False

        url = canonicalize_url(urls[0])
        if url is None:
            return False

        result = self.summarize(url)
        if not result.ok or result.reply is None:
            logger.info("No summary for %s", url)
            return False

        return self.reply(event.reply_token, format_reply(result.url or url, result.reply))

    def reply(self, reply_token: str, text: str) -> bool:
        payload = {
            "replyToken": reply_token,
            "notificationDisabled": True,
            "messages": [{"type": "text", "text": text}],
        }
        try:
            response = self.client.post(
                self.reply_url,
                headers={"Authorization": f"Bearer {self.access_token}"},
                json=payload,
            )
            response.raise_for_status()
        except httpx.HTTPError as exc:
            logger.warning("LINE reply failed: %s", exc)
            return False
        return True
