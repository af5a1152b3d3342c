"""Context and byte helpers used around SQL statement handling."""

from __future__ import annotations

import struct
from collections.abc import Mapping
from typing import Any

TABLE_NAME_KEY = "ctx_ast_table_name"

_UINT32 = struct.Struct("<I")


def with_table_name(ctx: Mapping[str, Any] | None, table_name: str) -> dict[str, Any]:
    """Return a copy of ``ctx`` carrying ``table_name``."""
    return {**(ctx or {}), TABLE_NAME_KEY: table_name}


def table_name_from_context(ctx: Mapping[str, Any] | None) -> str | None:
    """Return the table name stored in ``ctx``, or ``None`` if there is none."""
    if not ctx:
        return None
    value = ctx.get(TABLE_NAME_KEY)
    return value if isinstance(value, str) else None


def uint32_to_bytes(n: int) -> bytes:
    """Encode ``n`` as four little-endian bytes."""
    if not 0 <= n <= 0xFFFFFFFF:
        raise ValueError(f"{n} does not fit in an unsigned 32-bit integer")
    return _UINT32.pack(n)


def bytes_to_uint32(data: bytes) -> int:
    """Decode the first four bytes of ``data`` as a little-endian integer."""
    if len(data) < _UINT32.size:
        raise ValueError("need at least 4 bytes to decode an unsigned 32-bit integer")
    return _UINT32.unpack_from(data)[0]