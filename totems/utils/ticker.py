"""
Ticker normalization.

A ticker is 1 to 10 ASCII letters. Lowercase letters fold to uppercase and
every case variant of the same letters maps to the same 32-byte key.
"""

import hashlib
from dataclasses import dataclass
from typing import Union

from totems.utils.exceptions import InvalidTickerChar, InvalidTickerLength

MAX_TICKER_LENGTH = 10


@dataclass(frozen=True)
class TickerKey:
    symbol: str
    key: bytes

    def __str__(self):
        return self.symbol

    @property
    def hex(self) -> str:
        return "0x" + self.key.hex()


def normalize(raw: Union[str, bytes]) -> TickerKey:
    data = raw.encode("utf-8") if isinstance(raw, str) else bytes(raw)

    if len(data) == 0 or len(data) > MAX_TICKER_LENGTH:
        raise InvalidTickerLength(len(data))

    folded = bytearray()
    for byte in data:
        if 0x61 <= byte <= 0x7A:
            byte -= 0x20
        elif not 0x41 <= byte <= 0x5A:
            raise InvalidTickerChar(chr(byte))
        folded.append(byte)

    symbol = folded.decode("ascii")
    return TickerKey(symbol=symbol, key=hashlib.sha256(bytes(folded)).digest())


def ticker_to_bytes(raw: Union[str, bytes]) -> bytes:
    return normalize(raw).key
