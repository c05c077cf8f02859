"""Conversions between Python values and JSON-RPC wire values.

Wire values are the plain JSON shapes `None`, `bool`, `int`, `float`, `str`,
`list` and `dict`.
"""

import binascii
import enum
import functools
import typing

import pydantic
import pydantic_core

from .error import DecodeError

T = typing.TypeVar("T")


def into_json(val: typing.Any) -> typing.Any:
    """Convert `val` into a wire value."""
    match val:
        case bytes() | bytearray() | memoryview():
            return bytes(val).hex()
        case enum.Enum():
            return val.value
        case pydantic.BaseModel():
            return val.model_dump(mode="json", by_alias=True, exclude_none=True)
        case list() | tuple():
            return [into_json(it) for it in val]
        case dict():
            return {k: into_json(v) for k, v in val.items()}
    # Decimal serializes as a string, which bitcoind accepts for amounts
    return pydantic_core.to_jsonable_python(val, by_alias=True, exclude_none=True)


def opt_into_json(opt: typing.Any) -> typing.Any:
    if opt is None:
        return None
    return into_json(opt)


def null() -> None:
    return None


def empty_arr() -> list:
    return []


def empty_obj() -> dict:
    return {}


def handle_defaults(args: list, defaults: list) -> list:
    """Substitute `None`s in `args` with values from `defaults`, except when
    they are trailing, in which case they are dropped from the returned list.

    `defaults` corresponds to the last elements of `args`:

        arg1 arg2 arg3 arg4
                  def1 def2

    Elements of `args` without a corresponding default are required and are
    never substituted. `args` is modified in place.
    """
    assert len(args) >= len(defaults)

    # Walk the optional arguments backwards, filling in defaults once the
    # first non-null optional argument has been seen.
    first_non_null_optional_idx = None
    for i in range(len(defaults)):
        args_i = len(args) - 1 - i
        defaults_i = len(defaults) - 1 - i
        if args[args_i] is None:
            if first_non_null_optional_idx is not None:
                if defaults[defaults_i] is None:
                    raise AssertionError(f"Missing `default` for argument idx {args_i}")
                args[args_i] = defaults[defaults_i]
        elif first_non_null_optional_idx is None:
            first_non_null_optional_idx = args_i

    required_num = len(args) - len(defaults)

    if first_non_null_optional_idx is not None:
        return args[: first_non_null_optional_idx + 1]
    return args[:required_num]


@functools.lru_cache(maxsize=None)
def _adapter(result_type: typing.Any) -> pydantic.TypeAdapter:
    return pydantic.TypeAdapter(result_type)


def from_json(result: typing.Any, result_type: typing.Any) -> typing.Any:
    """Validate a wire value into `result_type`."""
    if result_type is typing.Any:
        return result
    try:
        return _adapter(result_type).validate_python(result)
    except pydantic.ValidationError as e:
        raise DecodeError(f"cannot decode result as {result_type!r}: {e}") from e


def opt_result(result: typing.Any, result_type: type[T]) -> T | None:
    """Convert a possibly-null result into an optional `result_type`."""
    if result is None:
        return None
    return from_json(result, result_type)


def decode_hex(hex_str: str) -> bytes:
    try:
        return bytes.fromhex(hex_str)
    except (TypeError, ValueError) as e:
        raise DecodeError(f"invalid hex: {hex_str!r}") from e


@typing.runtime_checkable
class RawTx(typing.Protocol):
    """Anything that can render itself as a raw transaction hex string."""

    def raw_hex(self) -> str: ...


def raw_hex(tx: typing.Any) -> str:
    """Normalize a raw transaction to a lowercase hex string.

    Accepts hex strings, byte buffers, `RawTx` implementations and objects
    with a `serialize()` method returning bytes (python-bitcoinlib style).
    The transaction itself is not validated.
    """
    match tx:
        case str():
            return tx.lower()
        case bytes() | bytearray() | memoryview():
            return binascii.hexlify(tx).decode("ascii")
        case RawTx():
            return tx.raw_hex().lower()
    serialize = getattr(tx, "serialize", None)
    if callable(serialize):
        return binascii.hexlify(serialize()).decode("ascii")
    raise TypeError(f"cannot use {type(tx).__name__} as a raw transaction")
