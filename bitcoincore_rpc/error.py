import typing


class Error(Exception):
    """Base class of every error raised by this library."""


class TransportError(Error):
    """The request could not be completed or the reply was not a JSON-RPC envelope."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class RpcError(Error):
    """The daemon executed the request and reported a fault."""

    def __init__(self, code: int, message: str, data: typing.Any = None) -> None:
        super().__init__(f"RPC error {code}: {message}")
        self.code = code
        self.message = message
        self.data = data


class DecodeError(Error):
    """The result does not have the expected shape."""


class InvalidCookieFile(Error):
    """The cookie file is missing, unreadable or has no `user:password` content."""
