"""Minimal synchronous JSON-RPC 1.0 over HTTP, as spoken by bitcoind."""

import decimal
import json
import logging
import threading
import typing

import pydantic
import requests

from .error import RpcError, TransportError

logger = logging.getLogger(__name__)


class Request(pydantic.BaseModel):
    method: str
    params: list[typing.Any]
    id: int
    jsonrpc: str | None = None


class RpcErrorObject(pydantic.BaseModel):
    code: int
    message: str
    data: typing.Any = None


class Response(pydantic.BaseModel):
    result: typing.Any = None
    error: RpcErrorObject | None = None
    id: typing.Any = None
    jsonrpc: str | None = None

    def into_result(self) -> typing.Any:
        """Return the result, or raise the fault reported by the daemon."""
        if self.error is not None:
            raise RpcError(self.error.code, self.error.message, self.error.data)
        return self.result


def _encode(o: typing.Any) -> typing.Any:
    if isinstance(o, decimal.Decimal):
        return str(o)
    raise TypeError(f"Object of type {type(o).__name__} is not JSON serializable")


def dumps(o: typing.Any) -> str:
    return json.dumps(o, default=_encode)


class JsonRpcClient:
    def __init__(
        self,
        url: str,
        user: str | None = None,
        password: str | None = None,
        session: requests.Session | None = None,
    ) -> None:
        self.url = url
        self.user = user
        self.password = password
        self.session = session if session is not None else requests.Session()
        self._nonce = 0
        self._nonce_lock = threading.Lock()

    def __repr__(self) -> str:
        if self.user is not None:
            return f"JsonRpcClient(url={self.url}, user={self.user}, password=...)"
        else:
            return f"JsonRpcClient(url={self.url})"

    def build_request(self, method: str, params: list[typing.Any]) -> Request:
        with self._nonce_lock:
            self._nonce += 1
            nonce = self._nonce
        return Request(method=method, params=params, id=nonce, jsonrpc="2.0")

    def last_nonce(self) -> int:
        return self._nonce

    def send_request(self, request: Request) -> Response:
        auth = (self.user, self.password or "") if self.user is not None else None
        try:
            http_resp = self.session.post(
                self.url,
                data=dumps(request.model_dump()),
                headers={"Content-Type": "application/json"},
                auth=auth,
            )
        except requests.RequestException as e:
            logger.debug("JSON-RPC connection to %s failed: %s", self.url, e)
            raise TransportError(f"cannot reach {self.url}: {e}") from e

        # bitcoind answers faults with a non-2xx status and a JSON body, so the
        # body decides before the status does.
        try:
            json_resp = json.loads(http_resp.text, parse_float=decimal.Decimal)
        except ValueError as e:
            raise TransportError(
                f"HTTP {http_resp.status_code} from {self.url}: {http_resp.text[:200]!r}",
                status_code=http_resp.status_code,
            ) from e
        if not isinstance(json_resp, dict):
            raise TransportError(
                f"expected a JSON-RPC object, got {type(json_resp).__name__}",
                status_code=http_resp.status_code,
            )
        try:
            response = Response.model_validate(json_resp)
        except pydantic.ValidationError as e:
            raise TransportError(
                f"malformed JSON-RPC response: {e}", status_code=http_resp.status_code
            ) from e
        # faults about the request itself may come back without an id
        if response.id != request.id and not (response.id is None and response.error is not None):
            raise TransportError(
                f"nonce mismatch: sent {request.id}, received {response.id!r}",
                status_code=http_resp.status_code,
            )
        return response

    def close(self) -> None:
        self.session.close()
