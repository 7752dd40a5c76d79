"""Lightweight value objects shared by releases and tracks."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Final

ISRC_PATTERN: Final[re.Pattern[str]] = re.compile(r"^[A-Z0-9]{12}$")


@dataclass(frozen=True, slots=True)
class AssetRef:
    """Reference to an uploaded object: storage key plus optional public URL."""

    object_key: str
    public_url: str | None = None

    @classmethod
    def from_columns(cls, object_key: str | None, public_url: str | None) -> AssetRef | None:
        if object_key is None:
            return None
        return cls(object_key=object_key, public_url=public_url)


def normalize_isrc(value: str) -> str:
    """Return the canonical (upper-case, hyphen-free) form of an ISRC code.

    Raises ``ValueError`` unless 12 alphanumeric characters remain.
    """

    candidate = value.strip().replace("-", "").upper()
    if not ISRC_PATTERN.match(candidate):
        raise ValueError(f"Invalid ISRC: {value!r}")
    return candidate
