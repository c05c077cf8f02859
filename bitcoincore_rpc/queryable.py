import typing

if typing.TYPE_CHECKING:
    from .client import RpcApi


@typing.runtime_checkable
class Queryable(typing.Protocol):
    """A type that can be fetched from the daemon given only its id.

    `GetBlockResult` is queryable by block hash and `GetRawTransactionResult`
    by txid; see `RpcApi.get_by_id`.
    """

    @classmethod
    def query(cls, rpc: "RpcApi", id: typing.Any) -> typing.Self: ...
