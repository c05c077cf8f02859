import json
import typing

import pytest
import requests

from bitcoincore_rpc.args import from_json
from bitcoincore_rpc.client import RpcApi


class RecordingRpc(RpcApi):
    """Records every call and answers with canned results."""

    def __init__(self, results: dict[str, typing.Any] | None = None) -> None:
        self.results = results or {}
        self.calls = list[tuple[str, list]]()

    def call(self, cmd: str, args: list[typing.Any], result_type: typing.Any = typing.Any) -> typing.Any:
        self.calls.append((cmd, list(args)))
        return from_json(self.results.get(cmd), result_type)

    @property
    def last(self) -> tuple[str, list]:
        return self.calls[-1]


class FakeResponse:
    def __init__(self, body: str, status_code: int = 200) -> None:
        self.text = body
        self.status_code = status_code


class FakeSession:
    """Stands in for `requests.Session`, echoing the request id by default."""

    def __init__(self) -> None:
        self.posts = list[dict]()
        self.reply: typing.Callable[[dict], FakeResponse] = lambda req: FakeResponse(
            json.dumps({"result": None, "error": None, "id": req["id"]})
        )
        self.closed = False

    def post(self, url, data=None, headers=None, auth=None):
        req = json.loads(data)
        self.posts.append(dict(url=url, body=req, headers=headers, auth=auth))
        return self.reply(req)

    def close(self) -> None:
        self.closed = True

    def answer(self, result=None, error=None, status_code: int = 200) -> None:
        self.reply = lambda req: FakeResponse(
            json.dumps({"result": result, "error": error, "id": req["id"]}), status_code
        )

    def answer_raw(self, body: str, status_code: int = 200) -> None:
        self.reply = lambda req: FakeResponse(body, status_code)

    def fail(self, exc: requests.RequestException) -> None:
        def reply(req):
            raise exc

        self.reply = reply


@pytest.fixture
def rpc() -> RecordingRpc:
    return RecordingRpc()


@pytest.fixture
def session() -> FakeSession:
    return FakeSession()
