import abc
import logging
import os
import typing
import warnings
from decimal import Decimal
from typing import Mapping

from .args import (
    decode_hex,
    empty_arr,
    empty_obj,
    from_json,
    handle_defaults,
    into_json,
    null,
    opt_into_json,
    opt_result,
    raw_hex,
)
from .auth import Auth, NoAuth, auth_from_env, get_user_pass
from .definitions import *
from .jsonrpc import JsonRpcClient, dumps
from .queryable import Queryable

logger = logging.getLogger(__name__)

Q = typing.TypeVar("Q", bound=Queryable)

DEFAULT_URL = "http://127.0.0.1:8332"


class RpcApi(abc.ABC):
    @abc.abstractmethod
    def call(self, cmd: str, args: list[typing.Any], result_type: typing.Any = typing.Any) -> typing.Any:
        """Call the `cmd` rpc with the given `args` list and decode the
        result as `result_type`."""
        raise NotImplementedError

    def get_by_id(self, cls: type[Q], id: typing.Any) -> Q:
        """Query an object implementing `Queryable`."""
        return cls.query(self, id)

    def add_multisig_address(
        self,
        nrequired: int,
        keys: list[PubKeyOrAddress],
        label: str | None = None,
        address_type: AddressType | None = None,
    ) -> AddMultiSigAddressResult:
        args = [into_json(nrequired), into_json(keys), opt_into_json(label), opt_into_json(address_type)]
        return self.call("addmultisigaddress", handle_defaults(args, [into_json(""), null()]), AddMultiSigAddressResult)

    def load_wallet(self, wallet: str) -> LoadWalletResult:
        return self.call("loadwallet", [wallet], LoadWalletResult)

    def unload_wallet(self, wallet: str | None = None) -> None:
        args = [opt_into_json(wallet)]
        return self.call("unloadwallet", handle_defaults(args, [null()]), None)

    def create_wallet(self, wallet: str, disable_private_keys: bool | None = None) -> LoadWalletResult:
        args = [wallet, opt_into_json(disable_private_keys)]
        return self.call("createwallet", handle_defaults(args, [null()]), LoadWalletResult)

    def backup_wallet(self, destination: str | None = None) -> None:
        args = [opt_into_json(destination)]
        return self.call("backupwallet", handle_defaults(args, [null()]), None)

    def dump_priv_key(self, address: str) -> str:
        """Return the private key of `address` in wallet import format."""
        return self.call("dumpprivkey", [address], str)

    def encrypt_wallet(self, passphrase: str) -> str | None:
        return self.call("encryptwallet", [into_json(passphrase)], str | None)

    def get_difficulty(self) -> float:
        return self.call("getdifficulty", [], float)

    def get_connection_count(self) -> int:
        return self.call("getconnectioncount", [], int)

    def get_block(self, hash: str) -> bytes:
        return decode_hex(self.get_block_hex(hash))

    def get_block_hex(self, hash: str) -> str:
        return self.call("getblock", [into_json(hash), 0], str)

    def get_block_info(self, hash: str) -> GetBlockResult:
        return self.call("getblock", [into_json(hash), 1], GetBlockResult)

    def get_block_header_raw(self, hash: str) -> bytes:
        return decode_hex(self.call("getblockheader", [into_json(hash), False], str))

    def get_block_header_verbose(self, hash: str) -> GetBlockHeaderResult:
        return self.call("getblockheader", [into_json(hash), True], GetBlockHeaderResult)

    def get_mining_info(self) -> GetMiningInfoResult:
        return self.call("getmininginfo", [], GetMiningInfoResult)

    def get_blockchain_info(self) -> GetBlockchainInfoResult:
        """Returns a data structure containing various state info regarding
        blockchain processing."""
        return self.call("getblockchaininfo", [], GetBlockchainInfoResult)

    def get_block_count(self) -> int:
        """Returns the numbers of block in the longest chain."""
        return self.call("getblockcount", [], int)

    def get_best_block_hash(self) -> str:
        """Returns the hash of the best (tip) block in the longest blockchain."""
        return self.call("getbestblockhash", [], str)

    def get_block_hash(self, height: int) -> str:
        """Get block hash at a given height"""
        return self.call("getblockhash", [height], str)

    def get_raw_transaction(self, txid: str, block_hash: str | None = None) -> bytes:
        return decode_hex(self.get_raw_transaction_hex(txid, block_hash))

    def get_raw_transaction_hex(self, txid: str, block_hash: str | None = None) -> str:
        args = [into_json(txid), into_json(False), opt_into_json(block_hash)]
        return self.call("getrawtransaction", handle_defaults(args, [null()]), str)

    def get_raw_transaction_verbose(self, txid: str, block_hash: str | None = None) -> GetRawTransactionResult:
        args = [into_json(txid), into_json(True), opt_into_json(block_hash)]
        return self.call("getrawtransaction", handle_defaults(args, [null()]), GetRawTransactionResult)

    def get_received_by_address(self, address: str, minconf: int | None = None) -> Decimal:
        args = [address, opt_into_json(minconf)]
        return self.call("getreceivedbyaddress", handle_defaults(args, [null()]), Decimal)

    def get_transaction(self, txid: str, include_watchonly: bool | None = None) -> GetTransactionResult:
        args = [into_json(txid), opt_into_json(include_watchonly)]
        return self.call("gettransaction", handle_defaults(args, [null()]), GetTransactionResult)

    def list_transactions(
        self,
        label: str | None = None,
        count: int | None = None,
        skip: int | None = None,
        include_watchonly: bool | None = None,
    ) -> list[ListTransactionResult]:
        args = [
            label if label is not None else "*",
            opt_into_json(count),
            opt_into_json(skip),
            opt_into_json(include_watchonly),
        ]
        return self.call(
            "listtransactions",
            handle_defaults(args, [10, 0, null()]),
            list[ListTransactionResult],
        )

    def get_tx_out(self, txid: str, vout: int, include_mempool: bool | None = None) -> GetTxOutResult | None:
        """Returns `None` when the output is spent or unknown."""
        args = [into_json(txid), into_json(vout), opt_into_json(include_mempool)]
        return opt_result(self.call("gettxout", handle_defaults(args, [null()])), GetTxOutResult)

    def get_tx_out_proof(self, txids: list[str], block_hash: str | None = None) -> bytes:
        args = [into_json(txids), opt_into_json(block_hash)]
        return decode_hex(self.call("gettxoutproof", handle_defaults(args, [null()]), str))

    def import_public_key(self, pubkey: str, label: str | None = None, rescan: bool | None = None) -> None:
        args = [pubkey, opt_into_json(label), opt_into_json(rescan)]
        return self.call("importpubkey", handle_defaults(args, [into_json(""), null()]), None)

    def import_priv_key(self, privkey: str, label: str | None = None, rescan: bool | None = None) -> None:
        args = [privkey, opt_into_json(label), opt_into_json(rescan)]
        return self.call("importprivkey", handle_defaults(args, [into_json(""), null()]), None)

    def import_address(
        self,
        address: str,
        label: str | None = None,
        rescan: bool | None = None,
        p2sh: bool | None = None,
    ) -> None:
        args = [address, opt_into_json(label), opt_into_json(rescan), opt_into_json(p2sh)]
        return self.call("importaddress", handle_defaults(args, [into_json(""), True, null()]), None)

    def import_multi(
        self,
        requests: list[ImportMultiRequest],
        options: ImportMultiOptions | None = None,
    ) -> list[ImportMultiResult]:
        args = [[into_json(req) for req in requests], opt_into_json(options)]
        return self.call("importmulti", handle_defaults(args, [null()]), list[ImportMultiResult])

    def set_label(self, address: str, label: str) -> None:
        return self.call("setlabel", [address, label], None)

    def key_pool_refill(self, new_size: int | None = None) -> None:
        args = [opt_into_json(new_size)]
        return self.call("keypoolrefill", handle_defaults(args, [null()]), None)

    def list_unspent(
        self,
        minconf: int | None = None,
        maxconf: int | None = None,
        addresses: list[str] | None = None,
        include_unsafe: bool | None = None,
        query_options: dict[str, typing.Any] | None = None,
    ) -> list[ListUnspentResult]:
        args = [
            opt_into_json(minconf),
            opt_into_json(maxconf),
            opt_into_json(addresses),
            opt_into_json(include_unsafe),
            opt_into_json(query_options),
        ]
        defaults = [into_json(0), into_json(9999999), empty_arr(), into_json(True), null()]
        return self.call("listunspent", handle_defaults(args, defaults), list[ListUnspentResult])

    def lock_unspent(self, outputs: list[OutPoint]) -> bool:
        """To unlock, use `unlock_unspent`."""
        return self.call("lockunspent", [False, into_json(outputs)], bool)

    def unlock_unspent(self, outputs: list[OutPoint]) -> bool:
        return self.call("lockunspent", [True, into_json(outputs)], bool)

    def list_received_by_address(
        self,
        address_filter: str | None = None,
        minconf: int | None = None,
        include_empty: bool | None = None,
        include_watchonly: bool | None = None,
    ) -> list[ListReceivedByAddressResult]:
        args = [
            opt_into_json(minconf),
            opt_into_json(include_empty),
            opt_into_json(include_watchonly),
            opt_into_json(address_filter),
        ]
        defaults = [1, False, False, null()]
        return self.call("listreceivedbyaddress", handle_defaults(args, defaults), list[ListReceivedByAddressResult])

    def create_raw_transaction_hex(
        self,
        utxos: list[CreateRawTransactionInput],
        outs: dict[str, float | Decimal],
        locktime: int | None = None,
        replaceable: bool | None = None,
    ) -> str:
        args = [into_json(utxos), into_json(outs), opt_into_json(locktime), opt_into_json(replaceable)]
        defaults = [into_json(0), null()]
        return self.call("createrawtransaction", handle_defaults(args, defaults), str)

    def create_raw_transaction(
        self,
        utxos: list[CreateRawTransactionInput],
        outs: dict[str, float | Decimal],
        locktime: int | None = None,
        replaceable: bool | None = None,
    ) -> bytes:
        return decode_hex(self.create_raw_transaction_hex(utxos, outs, locktime, replaceable))

    def fund_raw_transaction(
        self,
        tx: typing.Any,
        options: FundRawTransactionOptions | None = None,
        is_witness: bool | None = None,
    ) -> FundRawTransactionResult:
        args = [raw_hex(tx), opt_into_json(options), opt_into_json(is_witness)]
        defaults = [empty_obj(), null()]
        return self.call("fundrawtransaction", handle_defaults(args, defaults), FundRawTransactionResult)

    def sign_raw_transaction(
        self,
        tx: typing.Any,
        utxos: list[SignRawTransactionInput] | None = None,
        private_keys: list[str] | None = None,
        sighash_type: SigHashType | None = None,
    ) -> SignRawTransactionResult:
        warnings.warn(
            "signrawtransaction is deprecated, use sign_raw_transaction_with_wallet "
            "or sign_raw_transaction_with_key",
            DeprecationWarning,
            stacklevel=2,
        )
        args = [raw_hex(tx), opt_into_json(utxos), opt_into_json(private_keys), opt_into_json(sighash_type)]
        defaults = [empty_arr(), empty_arr(), null()]
        return self.call("signrawtransaction", handle_defaults(args, defaults), SignRawTransactionResult)

    def sign_raw_transaction_with_wallet(
        self,
        tx: typing.Any,
        utxos: list[SignRawTransactionInput] | None = None,
        sighash_type: SigHashType | None = None,
    ) -> SignRawTransactionResult:
        args = [raw_hex(tx), opt_into_json(utxos), opt_into_json(sighash_type)]
        defaults = [empty_arr(), null()]
        return self.call("signrawtransactionwithwallet", handle_defaults(args, defaults), SignRawTransactionResult)

    def sign_raw_transaction_with_key(
        self,
        tx: typing.Any,
        privkeys: list[str],
        prevtxs: list[SignRawTransactionInput] | None = None,
        sighash_type: SigHashType | None = None,
    ) -> SignRawTransactionResult:
        args = [raw_hex(tx), into_json(privkeys), opt_into_json(prevtxs), opt_into_json(sighash_type)]
        defaults = [empty_arr(), null()]
        return self.call("signrawtransactionwithkey", handle_defaults(args, defaults), SignRawTransactionResult)

    def test_mempool_accept(self, rawtxs: list[typing.Any]) -> list[TestMempoolAccept]:
        hexes = [raw_hex(r) for r in rawtxs]
        return self.call("testmempoolaccept", [hexes], list[TestMempoolAccept])

    def stop(self) -> str | None:
        return self.call("stop", [], str | None)

    def verify_message(self, address: str, signature: str, message: str) -> bool:
        args = [address, signature, into_json(message)]
        return self.call("verifymessage", args, bool)

    def get_new_address(self, label: str | None = None, address_type: AddressType | None = None) -> str:
        """Generate new address under own control"""
        args = [opt_into_json(label), opt_into_json(address_type)]
        return self.call("getnewaddress", handle_defaults(args, [into_json(""), null()]), str)

    def generate_to_address(self, block_num: int, address: str) -> list[str]:
        """Mine `block_num` blocks and pay coinbase to `address`

        Returns hashes of the generated blocks
        """
        return self.call("generatetoaddress", [block_num, address], list[str])

    def generate(self, block_num: int, maxtries: int | None = None) -> list[str]:
        """Mine up to block_num blocks immediately (before the RPC call returns)
        to an address in the wallet."""
        args = [block_num, opt_into_json(maxtries)]
        return self.call("generate", handle_defaults(args, [null()]), list[str])

    def invalidate_block(self, block_hash: str) -> None:
        """Mark a block as invalid by `block_hash`"""
        return self.call("invalidateblock", [into_json(block_hash)], None)

    def reconsider_block(self, block_hash: str) -> None:
        """Mark a block as valid by `block_hash`"""
        return self.call("reconsiderblock", [into_json(block_hash)], None)

    def get_raw_mempool(self) -> list[str]:
        """Get txids of all transactions in a memory pool"""
        return self.call("getrawmempool", [], list[str])

    def send_to_address(
        self,
        address: str,
        amount: float | Decimal,
        comment: str | None = None,
        comment_to: str | None = None,
        subtract_fee: bool | None = None,
        replaceable: bool | None = None,
        confirmation_target: int | None = None,
        estimate_mode: EstimateMode | None = None,
    ) -> str:
        args = [
            address,
            into_json(amount),
            opt_into_json(comment),
            opt_into_json(comment_to),
            opt_into_json(subtract_fee),
            opt_into_json(replaceable),
            opt_into_json(confirmation_target),
            opt_into_json(estimate_mode),
        ]
        return self.call("sendtoaddress", handle_defaults(args, [null()] * 6), str)

    def get_peer_info(self) -> list[GetPeerInfoResult]:
        """Returns data about each connected network node."""
        return self.call("getpeerinfo", [], list[GetPeerInfoResult])

    def ping(self) -> None:
        """Requests that a ping be sent to all other nodes, to measure ping
        time.

        Results provided in `getpeerinfo`, `pingtime` and `pingwait` fields
        are decimal seconds.

        Ping command is handled in queue with all other commands, so it
        measures processing backlog, not just network ping.
        """
        return self.call("ping", [], None)

    def send_raw_transaction(self, tx: typing.Any) -> str:
        return self.call("sendrawtransaction", [raw_hex(tx)], str)

    def estimate_smart_fee(self, conf_target: int, estimate_mode: EstimateMode | None = None) -> EstimateSmartFeeResult:
        args = [into_json(conf_target), opt_into_json(estimate_mode)]
        return self.call("estimatesmartfee", handle_defaults(args, [null()]), EstimateSmartFeeResult)

    def wait_for_new_block(self, timeout: int) -> BlockRef:
        """Waits for a specific new block and returns useful info about it.
        Returns the current block on timeout or exit.

        `timeout` is the time in milliseconds to wait for a response, 0
        meaning no timeout.
        """
        return self.call("waitfornewblock", [into_json(timeout)], BlockRef)

    def wait_for_block(self, blockhash: str, timeout: int) -> BlockRef:
        """Waits for block `blockhash` and returns useful info about it.
        Returns the current block on timeout or exit."""
        args = [into_json(blockhash), into_json(timeout)]
        return self.call("waitforblock", args, BlockRef)


class Client(RpcApi):
    """A JSON-RPC client for the Bitcoin Core daemon or compatible APIs."""

    def __init__(self, url: str, auth: Auth = NoAuth()) -> None:
        """Can only raise when using cookie authentication."""
        user, password = get_user_pass(auth)
        self.client = JsonRpcClient(url, user, password)

    @classmethod
    def from_jsonrpc(cls, client: JsonRpcClient) -> typing.Self:
        this = cls.__new__(cls)
        this.client = client
        return this

    @classmethod
    def from_env(cls, environ: Mapping[str, str] = os.environ) -> typing.Self:
        """Build a client from `BITCOIN_RPC_URL` and the variables read by
        `auth_from_env`."""
        return cls(environ.get("BITCOIN_RPC_URL", DEFAULT_URL), auth_from_env(environ))

    def get_jsonrpc_client(self) -> JsonRpcClient:
        return self.client

    def __repr__(self) -> str:
        return f"Client(JsonRpcClient(last_nonce={self.client.last_nonce()}))"

    def __enter__(self) -> typing.Self:
        return self

    def __exit__(self, *exc_info: typing.Any) -> None:
        self.client.close()

    def call(self, cmd: str, args: list[typing.Any], result_type: typing.Any = typing.Any) -> typing.Any:
        req = self.client.build_request(cmd, args)
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug("JSON-RPC request: %s", dumps(req.model_dump()))

        resp = self.client.send_request(req)
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug("JSON-RPC response: %s", dumps(resp.model_dump()))

        return from_json(resp.into_result(), result_type)
