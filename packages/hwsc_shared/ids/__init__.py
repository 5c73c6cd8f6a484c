"""Identifier generators for HWSC documents and file entries."""

from packages.hwsc_shared.ids.duid import (
    DUID_LENGTH,
    DuidGenerator,
    decode_duid_timestamp,
    generate_duid,
)
from packages.hwsc_shared.ids.fuid import FUID_LENGTH, generate_fuid

__all__ = [
    "DUID_LENGTH",
    "DuidGenerator",
    "FUID_LENGTH",
    "decode_duid_timestamp",
    "generate_duid",
    "generate_fuid",
]
