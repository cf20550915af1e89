"""Host classification against the video-host whitelist."""

from collections.abc import Mapping, Sequence

from .schemas import HostKind

VIDEO_WHITELIST: dict[str, list[str]] = {
    "youtube": [
        "www.youtube.com",
        "youtu.be",
        "m.youtube.com",
        "www.youtube-nocookie.com",
    ],
}


def video_hosts(whitelist: Mapping[str, Sequence[str]] = VIDEO_WHITELIST) -> frozenset[str]:
    return frozenset(host for hosts in whitelist.values() for host in hosts)


def classify(host: str, whitelist: Mapping[str, Sequence[str]] = VIDEO_WHITELIST) -> HostKind:
    """Exact, case-sensitive match. Subdomains count only when listed."""
    return HostKind.VIDEO if host in video_hosts(whitelist) else HostKind.GENERIC
