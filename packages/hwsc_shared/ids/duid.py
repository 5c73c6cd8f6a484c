"""Sortable 27-character document identifiers.

A DUID packs a 4-byte big-endian seconds timestamp (offset from a custom
epoch) and 16 bytes of cryptographically secure entropy into 20 bytes,
rendered as a fixed-width 27-character base-62 string. Lexicographic order of
the string matches numeric order of the bytes, so identifiers sort by creation
second.
"""

from __future__ import annotations

import secrets
import threading
import time
from typing import Callable

DUID_EPOCH = 1_400_000_000
DUID_LENGTH = 27

_ALPHABET = "0123456789ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz"
_DECODE_TABLE = {char: index for index, char in enumerate(_ALPHABET)}
_TIMESTAMP_BYTES = 4
_PAYLOAD_BYTES = 16
_MAX_TIMESTAMP = (1 << 32) - 1
_MAX_PAYLOAD = (1 << 128) - 1


def encode_duid(value: bytes) -> str:
    """Encode 20 raw bytes into the fixed-width base-62 DUID string."""
    if len(value) != _TIMESTAMP_BYTES + _PAYLOAD_BYTES:
        raise ValueError("DUID bytes must be exactly 20 bytes")
    number = int.from_bytes(value, byteorder="big", signed=False)
    chars: list[str] = []
    for _ in range(DUID_LENGTH):
        number, remainder = divmod(number, 62)
        chars.append(_ALPHABET[remainder])
    return "".join(reversed(chars))


def decode_duid(value: str) -> bytes:
    """Decode a 27-character DUID string back into its 20 raw bytes."""
    if len(value) != DUID_LENGTH:
        raise ValueError("DUID string must be exactly 27 characters")
    number = 0
    for char in value:
        if char not in _DECODE_TABLE:
            raise ValueError(f"Invalid DUID character: {char!r}")
        number = number * 62 + _DECODE_TABLE[char]
    if number >= 1 << 160:
        raise ValueError("DUID value exceeds 160-bit range")
    return number.to_bytes(_TIMESTAMP_BYTES + _PAYLOAD_BYTES, "big", signed=False)


def decode_duid_timestamp(value: str) -> int:
    """Return the Unix seconds timestamp embedded in one DUID."""
    raw = decode_duid(value)
    return int.from_bytes(raw[:_TIMESTAMP_BYTES], "big", signed=False) + DUID_EPOCH


class DuidGenerator:
    """Thread-safe DUID producer.

    Within one process the generator never emits the same identifier twice:
    when two calls land in the same second the payload of the previous
    identifier is incremented instead of drawing fresh entropy, which also
    keeps identifiers from one generator strictly increasing.
    """

    def __init__(self, *, clock: Callable[[], float] = time.time) -> None:
        self._clock = clock
        self._lock = threading.Lock()
        self._last_timestamp = -1
        self._last_payload = 0

    def next(self) -> str:
        """Return the next DUID."""
        with self._lock:
            timestamp = max(int(self._clock()) - DUID_EPOCH, self._last_timestamp)
            if timestamp < 0 or timestamp > _MAX_TIMESTAMP:
                raise ValueError("clock is outside the DUID timestamp range")

            if timestamp == self._last_timestamp:
                payload = self._last_payload + 1
                if payload > _MAX_PAYLOAD:
                    timestamp += 1
                    payload = _random_payload()
            else:
                payload = _random_payload()

            self._last_timestamp = timestamp
            self._last_payload = payload

        raw = timestamp.to_bytes(_TIMESTAMP_BYTES, "big") + payload.to_bytes(
            _PAYLOAD_BYTES, "big"
        )
        return encode_duid(raw)


def _random_payload() -> int:
    return int.from_bytes(secrets.token_bytes(_PAYLOAD_BYTES), "big", signed=False)


_DEFAULT_GENERATOR = DuidGenerator()


def generate_duid() -> str:
    """Generate a new DUID from the process-wide generator."""
    return _DEFAULT_GENERATOR.next()
