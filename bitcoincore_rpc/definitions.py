"""Result and option types of the bitcoind RPC commands."""

import enum
import typing
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field

if typing.TYPE_CHECKING:
    from .client import RpcApi


class Model(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


# Enums


class AddressType(str, enum.Enum):
    LEGACY = "legacy"
    P2SH_SEGWIT = "p2sh-segwit"
    BECH32 = "bech32"


class EstimateMode(str, enum.Enum):
    UNSET = "UNSET"
    ECONOMICAL = "ECONOMICAL"
    CONSERVATIVE = "CONSERVATIVE"


class SigHashType(str, enum.Enum):
    ALL = "ALL"
    NONE = "NONE"
    SINGLE = "SINGLE"
    ALL_ANYONECANPAY = "ALL|ANYONECANPAY"
    NONE_ANYONECANPAY = "NONE|ANYONECANPAY"
    SINGLE_ANYONECANPAY = "SINGLE|ANYONECANPAY"


# a hex public key or an address
PubKeyOrAddress = str


# Request types


class OutPoint(Model):
    txid: str
    vout: int


class CreateRawTransactionInput(Model):
    txid: str
    vout: int
    sequence: int | None = None


class FundRawTransactionOptions(Model):
    change_address: str | None = Field(default=None, alias="changeAddress")
    change_position: int | None = Field(default=None, alias="changePosition")
    change_type: AddressType | None = None
    include_watching: bool | None = Field(default=None, alias="includeWatching")
    lock_unspents: bool | None = Field(default=None, alias="lockUnspents")
    fee_rate: Decimal | None = Field(default=None, alias="feeRate")
    subtract_fee_from_outputs: list[int] | None = Field(default=None, alias="subtractFeeFromOutputs")
    replaceable: bool | None = None
    conf_target: int | None = None
    estimate_mode: EstimateMode | None = None


class SignRawTransactionInput(Model):
    txid: str
    vout: int
    script_pub_key: str = Field(alias="scriptPubKey")
    redeem_script: str | None = Field(default=None, alias="redeemScript")
    witness_script: str | None = Field(default=None, alias="witnessScript")
    amount: Decimal | None = None


class ImportMultiRescanSince(str, enum.Enum):
    NOW = "now"


class ImportMultiRequest(Model):
    timestamp: int | ImportMultiRescanSince = ImportMultiRescanSince.NOW
    descriptor: str | None = Field(default=None, alias="desc")
    # either a script hex or {"address": <address>}
    script_pub_key: str | dict[str, str] | None = Field(default=None, alias="scriptPubKey")
    redeem_script: str | None = Field(default=None, alias="redeemscript")
    witness_script: str | None = Field(default=None, alias="witnessscript")
    pubkeys: list[str] | None = None
    keys: list[str] | None = None
    range: tuple[int, int] | None = None
    internal: bool | None = None
    watchonly: bool | None = None
    label: str | None = None
    keypool: bool | None = None


class ImportMultiOptions(Model):
    rescan: bool | None = None


# Result types


class AddMultiSigAddressResult(Model):
    address: str
    redeem_script: str = Field(alias="redeemScript")


class LoadWalletResult(Model):
    name: str
    warning: str | None = None


class GetBlockResult(Model):
    hash: str
    confirmations: int
    size: int
    strippedsize: int | None = None
    weight: int
    height: int
    version: int
    version_hex: str | None = Field(default=None, alias="versionHex")
    merkleroot: str
    tx: list[str]
    time: int
    mediantime: int | None = None
    nonce: int
    bits: str
    difficulty: float
    chainwork: str
    n_tx: int = Field(alias="nTx")
    previousblockhash: str | None = None
    nextblockhash: str | None = None

    @classmethod
    def query(cls, rpc: "RpcApi", id: str) -> "GetBlockResult":
        return rpc.get_block_info(id)


class GetBlockHeaderResult(Model):
    hash: str
    confirmations: int
    height: int
    version: int
    version_hex: str | None = Field(default=None, alias="versionHex")
    merkleroot: str
    time: int
    mediantime: int | None = None
    nonce: int
    bits: str
    difficulty: float
    chainwork: str
    n_tx: int = Field(alias="nTx")
    previousblockhash: str | None = None
    nextblockhash: str | None = None


class GetMiningInfoResult(Model):
    blocks: int
    currentblockweight: int | None = None
    currentblocktx: int | None = None
    difficulty: float
    networkhashps: float
    pooledtx: int
    chain: str
    warnings: str


class GetBlockchainInfoResult(Model):
    chain: str
    blocks: int
    headers: int
    bestblockhash: str
    difficulty: float
    mediantime: int
    verificationprogress: float
    initialblockdownload: bool
    chainwork: str
    size_on_disk: int
    pruned: bool
    pruneheight: int | None = None
    automatic_pruning: bool | None = None
    prune_target_size: int | None = None
    softforks: typing.Any = None
    warnings: str


class ScriptSig(Model):
    asm: str
    hex: str


class ScriptPubKey(Model):
    asm: str
    hex: str
    req_sigs: int | None = Field(default=None, alias="reqSigs")
    type: str | None = None
    addresses: list[str] | None = None
    address: str | None = None


class GetRawTransactionResultVin(Model):
    txid: str | None = None
    vout: int | None = None
    script_sig: ScriptSig | None = Field(default=None, alias="scriptSig")
    coinbase: str | None = None
    txinwitness: list[str] | None = None
    sequence: int

    def is_coinbase(self) -> bool:
        return self.coinbase is not None


class GetRawTransactionResultVout(Model):
    value: Decimal
    n: int
    script_pub_key: ScriptPubKey = Field(alias="scriptPubKey")


class GetRawTransactionResult(Model):
    in_active_chain: bool | None = None
    hex: str
    txid: str
    hash: str
    size: int
    vsize: int
    version: int
    locktime: int
    vin: list[GetRawTransactionResultVin]
    vout: list[GetRawTransactionResultVout]
    blockhash: str | None = None
    confirmations: int | None = None
    time: int | None = None
    blocktime: int | None = None

    def is_coinbase(self) -> bool:
        return len(self.vin) == 1 and self.vin[0].is_coinbase()

    @classmethod
    def query(cls, rpc: "RpcApi", id: str) -> "GetRawTransactionResult":
        return rpc.get_raw_transaction_verbose(id)


class GetTransactionResultDetail(Model):
    address: str | None = None
    category: str
    amount: Decimal
    label: str | None = None
    vout: int
    fee: Decimal | None = None
    abandoned: bool | None = None


class GetTransactionResult(Model):
    amount: Decimal
    fee: Decimal | None = None
    confirmations: int
    blockhash: str | None = None
    blockindex: int | None = None
    blocktime: int | None = None
    txid: str
    time: int
    timereceived: int
    bip125_replaceable: str | None = Field(default=None, alias="bip125-replaceable")
    details: list[GetTransactionResultDetail]
    hex: str


class ListTransactionResult(Model):
    address: str | None = None
    category: str
    amount: Decimal
    label: str | None = None
    vout: int
    fee: Decimal | None = None
    confirmations: int
    blockhash: str | None = None
    blockindex: int | None = None
    blocktime: int | None = None
    txid: str
    time: int
    timereceived: int
    bip125_replaceable: str | None = Field(default=None, alias="bip125-replaceable")
    abandoned: bool | None = None


class GetTxOutResult(Model):
    bestblock: str
    confirmations: int
    value: Decimal
    script_pub_key: ScriptPubKey = Field(alias="scriptPubKey")
    coinbase: bool


class ImportMultiResultError(Model):
    code: int
    message: str


class ImportMultiResult(Model):
    success: bool
    warnings: list[str] = []
    error: ImportMultiResultError | None = None


class ListUnspentResult(Model):
    txid: str
    vout: int
    address: str | None = None
    label: str | None = None
    redeem_script: str | None = Field(default=None, alias="redeemScript")
    witness_script: str | None = Field(default=None, alias="witnessScript")
    script_pub_key: str = Field(alias="scriptPubKey")
    amount: Decimal
    confirmations: int
    spendable: bool
    solvable: bool
    desc: str | None = None
    safe: bool


class ListReceivedByAddressResult(Model):
    involves_watchonly: bool | None = Field(default=None, alias="involvesWatchonly")
    address: str
    amount: Decimal
    confirmations: int
    label: str
    txids: list[str]


class FundRawTransactionResult(Model):
    hex: str
    fee: Decimal
    changepos: int

    def transaction(self) -> bytes:
        return bytes.fromhex(self.hex)


class SignRawTransactionResultError(Model):
    txid: str
    vout: int
    script_sig: str = Field(alias="scriptSig")
    sequence: int
    error: str


class SignRawTransactionResult(Model):
    hex: str
    complete: bool
    errors: list[SignRawTransactionResultError] = []

    def transaction(self) -> bytes:
        return bytes.fromhex(self.hex)


class TestMempoolAccept(Model):
    txid: str
    allowed: bool
    reject_reason: str | None = Field(default=None, alias="reject-reason")


class GetPeerInfoResult(Model):
    id: int
    addr: str
    addrbind: str | None = None
    addrlocal: str | None = None
    services: str
    relaytxes: bool | None = None
    lastsend: int
    lastrecv: int
    bytessent: int
    bytesrecv: int
    conntime: int
    timeoffset: int
    pingtime: float | None = None
    minping: float | None = None
    pingwait: float | None = None
    version: int
    subver: str
    inbound: bool
    addnode: bool | None = None
    startingheight: int | None = None
    banscore: int | None = None
    synced_headers: int | None = None
    synced_blocks: int | None = None
    inflight: list[int] = []
    whitelisted: bool | None = None
    bytessent_per_msg: dict[str, int] = {}
    bytesrecv_per_msg: dict[str, int] = {}


class EstimateSmartFeeResult(Model):
    feerate: Decimal | None = None
    errors: list[str] | None = None
    blocks: int


class BlockRef(Model):
    hash: str
    height: int

