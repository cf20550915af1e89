"""Failure kinds raised inside the summarizer core.

All of them are caught by the dispatcher and collapsed into ``{"ok": false}``.
"""


class SummarizerError(Exception):
    """Base class for every failure the core raises on purpose."""


class InvalidInput(SummarizerError):
    """Malformed or host-less URL."""


class ExternalToolFailure(SummarizerError):
    """Downloader or transcoder exited non-zero or timed out."""


class ExternalServiceFailure(SummarizerError):
    """HTTP fetch, speech-to-text or chat completion failed or returned unusable data."""


class UnparseableModelOutput(SummarizerError):
    """The model response is not JSON of the expected shape."""
