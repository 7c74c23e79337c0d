"""Result types for chat-completion calls."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Ok:
    """A completion that returned text content."""

    content: str


@dataclass(frozen=True)
class ParseError:
    """The upstream answered, but the reply had no usable content."""

    message: str
    raw: str | None = None


@dataclass(frozen=True)
class UpstreamError:
    """The call failed: network error, timeout, or a non-2xx status."""

    message: str
    status_code: int | None = None


CompletionResult = Ok | ParseError | UpstreamError


class UpstreamCallError(Exception):
    """Raised when a non-``Ok`` completion result is used as text."""

    def __init__(self, result: ParseError | UpstreamError) -> None:
        super().__init__(result.message)
        self.result = result

    @property
    def status_code(self) -> int | None:
        if isinstance(self.result, UpstreamError):
            return self.result.status_code
        return None


def unwrap(result: CompletionResult) -> str:
    """Return the text of an ``Ok`` result or raise :class:`UpstreamCallError`."""
    if isinstance(result, Ok):
        return result.content
    raise UpstreamCallError(result)
