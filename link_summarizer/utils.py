"""Utility functions for URL validation, text cleaning and HTML/subtitle conversion."""

import os
import re
from urllib.parse import urlsplit

from bs4 import BeautifulSoup

SRT_NOISE_PATTERN = re.compile(r"( --> .+)$|^\d+$", re.MULTILINE)
NON_CONTENT_TAGS = ["script", "style", "noscript", "template", "svg"]


def clean_text(text: str) -> str:
    """Clean text by removing excessive whitespace and normalizing.

    Args:
        text: The text to clean

    Returns:
        Cleaned text string
    """
    # Remove trailing spaces on every line
    text = re.sub(r"[ \t]+\n", "\n", text)
    # Remove excessive newlines
    text = re.sub(r"\n{3,}", r"\n\n", text)
    # Remove excessive spaces
    text = re.sub(r" {2,}", " ", text)
    return text.strip()


def limit_text(text: str, max_length: int) -> str:
    """Hard cut ``text`` to ``max_length`` characters, without an ellipsis."""
    return text[:max_length]


def parse_host(url: str) -> str | None:
    """Return the host of an absolute http(s) URL, or None when it is not one.

    Args:
        url: Candidate URL

    Returns:
        Hostname as written (no port, no credentials), or None
    """
    if not isinstance(url, str) or not url or any(ch.isspace() for ch in url):
        return None
    try:
        parts = urlsplit(url)
        host = parts.hostname
        # Accessing .port validates it.
        parts.port
    except ValueError:
        return None
    if parts.scheme not in {"http", "https"} or not host:
        return None
    # urlsplit lowercases hostname; keep the host as written for exact matching.
    netloc_host = parts.netloc.rsplit("@", 1)[-1]
    if netloc_host.startswith("["):
        return host
    return netloc_host.split(":", 1)[0] or None


def html_to_text(html: str) -> str:
    """Convert an HTML document to plain text. Links keep only their anchor text."""
    soup = BeautifulSoup(html, "html.parser")
    for tag in soup(NON_CONTENT_TAGS):
        tag.decompose()
    return clean_text(soup.get_text("\n"))


def strip_srt_timing(srt: str) -> str:
    """Drop SRT index lines and cut every timing line down to its start time."""
    return clean_text(SRT_NOISE_PATTERN.sub("", srt))


def sidecar_path(audio_path: str, extension: str = ".srt") -> str:
    """Path of the transcript sitting next to an audio artifact."""
    return f"{os.path.splitext(audio_path)[0]}{extension}"
