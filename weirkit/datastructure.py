"""Small collection helpers."""

from __future__ import annotations

from collections.abc import Iterable


def string_slice_to_set(items: Iterable[str] | None) -> set[str]:
    """Return the distinct strings of ``items``; ``None`` gives an empty set."""
    return set(items or ())