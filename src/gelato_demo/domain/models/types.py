from __future__ import annotations

from typing import Annotated, Any

from eth_utils import is_address, to_checksum_address
from pydantic import AfterValidator, BeforeValidator

HASH_ZERO = bytes(32)


def _checksum(value: str) -> str:
    if not is_address(value):
        raise ValueError(f"{value!r} is not a valid address")
    return to_checksum_address(value)


def _to_bytes(value: Any) -> Any:
    if isinstance(value, str):
        raw = value[2:] if value.startswith(("0x", "0X")) else value
        try:
            return bytes.fromhex(raw)
        except ValueError as exc:
            raise ValueError(f"{value!r} is not valid hex data") from exc
    return value


Address = Annotated[str, AfterValidator(_checksum)]
HexData = Annotated[bytes, BeforeValidator(_to_bytes)]
