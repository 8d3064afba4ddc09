# /fetchkit/domain/errors.py
from __future__ import annotations


class FetchError(Exception):
    """Uniform fetch failure: message, HTTP status (None when no response arrived) and URL."""

    def __init__(self, message: str, *, status: int | None = None, url: str = "") -> None:
        super().__init__(message)
        self.message = message
        self.status = status
        self.url = url

    def __str__(self) -> str:
        return self.message

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.message!r}, status={self.status!r}, url={self.url!r})"


class TransportError(FetchError):
    """The GET itself could not be completed (DNS, connect, TLS, I/O)."""

    def __init__(self, message: str, *, url: str = "") -> None:
        super().__init__(message, status=None, url=url)


class StatusError(FetchError):
    """A response arrived but its status was not 200."""

    @classmethod
    def for_status(cls, url: str, status: int) -> StatusError:
        return cls(f"Get {url} -> {status}", status=status, url=url)


class DecodeError(FetchError):
    """JSON body could not be parsed; carries the status the body came with."""
