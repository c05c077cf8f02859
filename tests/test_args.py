import enum
from decimal import Decimal

import pytest

from bitcoincore_rpc.args import (
    decode_hex,
    from_json,
    handle_defaults,
    into_json,
    opt_into_json,
    opt_result,
    raw_hex,
)
from bitcoincore_rpc.definitions import BlockRef, CreateRawTransactionInput, EstimateMode
from bitcoincore_rpc.error import DecodeError


@pytest.mark.parametrize(
    "args, defaults, expected",
    [
        ([0, None, None], [1, 2], [0]),
        ([0, 1, None], [2], [0, 1]),
        ([0, None, 5], [2, 3], [0, 2, 5]),
        ([0, None, 5, None], [2, 3, 4], [0, 2, 5]),
        ([None, None], [2, 3], []),
        ([None, 1], [], [None, 1]),
        ([], [], []),
        ([0], [2], [0]),
    ],
)
def test_handle_defaults(args, defaults, expected):
    assert handle_defaults(args, defaults) == expected


def test_handle_defaults_all_null_optionals_keeps_required_prefix():
    args = ["a", "b", None, None, None]
    assert handle_defaults(args, [1, 2, 3]) == ["a", "b"]


def test_handle_defaults_last_optional_set_keeps_everything():
    args = ["a", None, None, "z"]
    assert handle_defaults(args, [1, 2, 3]) == ["a", 1, 2, "z"]


def test_handle_defaults_preserves_explicit_values():
    explicit = {"k": "v"}
    args = [0, None, explicit, None]
    result = handle_defaults(args, [[], [], None])
    assert result == [0, [], explicit]
    assert result[2] is explicit


def test_handle_defaults_falsy_values_are_not_null():
    assert handle_defaults([0, False, None], [True, None]) == [0, False]
    assert handle_defaults([0, None, 0], [True, 1]) == [0, True, 0]


def test_handle_defaults_missing_default_is_fatal():
    with pytest.raises(AssertionError, match="idx 1"):
        handle_defaults([0, None, 5], [None, 3])


def test_handle_defaults_more_defaults_than_args():
    with pytest.raises(AssertionError):
        handle_defaults([0], [1, 2])


def test_into_json():
    assert into_json(5) == 5
    assert into_json("abc") == "abc"
    assert into_json(b"\xde\xad") == "dead"
    assert into_json(EstimateMode.ECONOMICAL) == "ECONOMICAL"
    assert into_json(Decimal("0.1")) == "0.1"
    assert into_json(CreateRawTransactionInput(txid="ab", vout=1)) == {"txid": "ab", "vout": 1}
    assert into_json({"addr": [BlockRef(hash="00", height=3)]}) == {"addr": [{"hash": "00", "height": 3}]}


def test_into_json_plain_enum():
    class Color(enum.Enum):
        RED = 1

    assert into_json(Color.RED) == 1


def test_opt_into_json():
    assert opt_into_json(None) is None
    assert opt_into_json(False) is False
    assert opt_into_json([1, 2]) == [1, 2]


def test_from_json():
    assert from_json(7, int) == 7
    assert from_json(Decimal("1.5"), Decimal) == Decimal("1.5")
    assert from_json({"hash": "00", "height": 3}, BlockRef) == BlockRef(hash="00", height=3)
    with pytest.raises(DecodeError):
        from_json({"hash": "00"}, BlockRef)
    with pytest.raises(DecodeError):
        from_json("not a number", int)


def test_opt_result():
    assert opt_result(None, BlockRef) is None
    assert opt_result({"hash": "00", "height": 3}, BlockRef).height == 3
    with pytest.raises(DecodeError):
        opt_result({"height": 3}, BlockRef)


def test_decode_hex():
    assert decode_hex("00ff") == b"\x00\xff"
    with pytest.raises(DecodeError):
        decode_hex("xyz")


class HexTx:
    def raw_hex(self) -> str:
        return "CAFE"


class SerializableTx:
    def serialize(self) -> bytes:
        return b"\x01\x00"


def test_raw_hex():
    assert raw_hex("deadbeef") == "deadbeef"
    assert raw_hex("DEADBEEF") == "deadbeef"
    assert raw_hex(b"\xde\xad\xbe\xef") == "deadbeef"
    assert raw_hex(bytearray(b"\xbe\xef")) == "beef"
    assert raw_hex(memoryview(b"\xbe\xef")) == "beef"
    assert raw_hex(HexTx()) == "cafe"
    assert raw_hex(SerializableTx()) == "0100"


def test_raw_hex_is_idempotent():
    canonical = raw_hex(b"\x02\x00\x00\x00\x01")
    assert raw_hex(canonical) == canonical
    assert raw_hex(raw_hex(canonical)) == canonical


def test_raw_hex_does_not_validate():
    assert raw_hex("not hex at all") == "not hex at all"


def test_raw_hex_rejects_unknown_types():
    with pytest.raises(TypeError):
        raw_hex(12345)
