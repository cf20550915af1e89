"""Webpage fetching with a browser user agent and an age-verification cookie."""

import logging
from typing import Protocol

import requests
from requests.cookies import RequestsCookieJar

from .errors import ExternalServiceFailure
from .settings import DEFAULT_USER_AGENT

logger = logging.getLogger(__name__)

AGE_COOKIE = ("over18", "1")


class HtmlFetcher(Protocol):
    def __call__(self, url: str, host: str) -> str: ...


def _decode_body(response: requests.Response) -> str:
    encoding = response.encoding or response.apparent_encoding or "utf-8"
    try:
        return response.content.decode(encoding, errors="replace")
    except LookupError:
        return response.content.decode("utf-8", errors="replace")


class WebpageFetcher:
    """GET a page and return its body, tolerating undecodable bytes."""

    def __init__(self, user_agent: str = DEFAULT_USER_AGENT, session: requests.Session | None = None):
        self.user_agent = user_agent
        self.session = session or requests.Session()

    def __call__(self, url: str, host: str) -> str:
        cookies = RequestsCookieJar()
        cookies.set(*AGE_COOKIE, domain=host)

        try:
            response = self.session.get(
                url,
                headers={"User-Agent": self.user_agent},
                cookies=cookies,
            )
        except requests.RequestException as exc:
            raise ExternalServiceFailure(f"Fetching {url} failed: {exc}") from exc

        if not response.ok:
            raise ExternalServiceFailure(f"Fetching {url} returned {response.status_code}")

        logger.info("Fetched %s (%s bytes)", url, len(response.content))
        return _decode_body(response)
