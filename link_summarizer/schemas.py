from dataclasses import dataclass
from enum import Enum
import json
import re
from typing import Any, Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError

T = TypeVar("T")

CODE_FENCE_PATTERN = re.compile(r"^```(?:json)?\s*(.*?)\s*```$", re.DOTALL)


class HostKind(str, Enum):
    VIDEO = "video"
    GENERIC = "generic"


class Reply(BaseModel):
    """Uniform reply shape returned by both pipelines."""

    main: str = Field(description="Synopsis of the page, or newline-joined video chapters.")
    comment: str | None = Field(default=None, description="Analysis of reader comments; always null for videos.")


class Chapter(BaseModel):
    """A single chronological section of a video."""

    # Models sometimes answer with a bare number of seconds.
    model_config = ConfigDict(coerce_numbers_to_str=True)

    time: str = Field(description="Start time of the section.")
    summarize: str = Field(description="Short summary of the section.")

    def to_line(self) -> str:
        return f"{self.time} - {self.summarize}"


class SummarizeResult(BaseModel):
    ok: bool
    url: str | None = None
    reply: Reply | None = None

    @classmethod
    def failure(cls) -> "SummarizeResult":
        return cls(ok=False)

    @classmethod
    def success(cls, url: str, reply: Reply) -> "SummarizeResult":
        return cls(ok=True, url=url, reply=reply)

    def to_response(self) -> dict[str, Any]:
        """Serialize without leaking anything but the ok flag on failure."""
        if not self.ok or self.reply is None:
            return {"ok": False}
        return {"ok": True, "url": self.url, "reply": self.reply.model_dump()}


@dataclass(frozen=True)
class ParsedOk(Generic[T]):
    value: T


@dataclass(frozen=True)
class ParseFailed:
    reason: str


ParseResult = ParsedOk[T] | ParseFailed

_chapters_adapter = TypeAdapter(list[Chapter])


def _strip_code_fence(content: str) -> str:
    content = content.strip()
    match = CODE_FENCE_PATTERN.match(content)
    return match.group(1) if match else content


def _load_json(content: str | None) -> ParseResult[Any]:
    if not content or not content.strip():
        return ParseFailed("empty model output")
    try:
        data = json.loads(_strip_code_fence(content))
    except json.JSONDecodeError as exc:
        return ParseFailed(f"invalid JSON: {exc.msg}")
    if data is None:
        return ParseFailed("model output is null")
    return ParsedOk(data)


def parse_reply(content: str | None) -> ParseResult[Reply]:
    """Parse a ``{"main": "", "comment": ""}`` object out of model output."""
    loaded = _load_json(content)
    if isinstance(loaded, ParseFailed):
        return loaded
    try:
        return ParsedOk(Reply.model_validate(loaded.value))
    except ValidationError as exc:
        return ParseFailed(f"unexpected reply shape: {exc.error_count()} errors")


def parse_chapters(content: str | None) -> ParseResult[list[Chapter]]:
    """Parse a ``[{"time": "", "summarize": ""}]`` array out of model output."""
    loaded = _load_json(content)
    if isinstance(loaded, ParseFailed):
        return loaded
    try:
        return ParsedOk(_chapters_adapter.validate_python(loaded.value))
    except ValidationError as exc:
        return ParseFailed(f"unexpected chapter shape: {exc.error_count()} errors")
