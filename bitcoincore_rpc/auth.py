import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping

from .error import InvalidCookieFile


@dataclass(frozen=True)
class NoAuth:
    pass


@dataclass(frozen=True)
class UserPass:
    username: str
    password: str

    def __repr__(self) -> str:
        return f"UserPass(username={self.username!r}, password=...)"


@dataclass(frozen=True)
class CookieFile:
    path: Path

    def __post_init__(self) -> None:
        object.__setattr__(self, "path", Path(self.path))


Auth = NoAuth | UserPass | CookieFile


def get_user_pass(auth: Auth) -> tuple[str | None, str | None]:
    """Resolve `auth` into the (user, password) pair sent with every request."""
    match auth:
        case NoAuth():
            return None, None
        case UserPass(username, password):
            return username, password
        case CookieFile(path):
            try:
                contents = path.read_text(encoding="utf-8")
            except (OSError, UnicodeDecodeError) as e:
                raise InvalidCookieFile(f"cannot read cookie file {path}: {e}") from e
            split = contents.split(":", 1)
            if len(split) != 2:
                raise InvalidCookieFile(f"cookie file {path} is not in `user:password` form")
            return split[0], split[1]
    raise TypeError(f"unknown authentication method: {auth!r}")


def auth_from_env(environ: Mapping[str, str] = os.environ) -> Auth:
    """Pick an authentication method from `BITCOIN_RPC_COOKIE`, or
    `BITCOIN_RPC_USER` and `BITCOIN_RPC_PASSWORD`."""
    if cookie := environ.get("BITCOIN_RPC_COOKIE"):
        return CookieFile(Path(cookie))
    user = environ.get("BITCOIN_RPC_USER")
    if user is not None:
        return UserPass(user, environ.get("BITCOIN_RPC_PASSWORD", ""))
    return NoAuth()
