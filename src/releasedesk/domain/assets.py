"""Object-key and public-URL conventions for uploaded release assets.

Keys are always scoped under ``releases/<release id>/`` so an upload finalised for
one release can never be attached to another.
"""

from __future__ import annotations

import re
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Final

from releasedesk.domain.model import AssetKind, AssetRef

if TYPE_CHECKING:
    from uuid import UUID

MAX_FILENAME_LENGTH: Final[int] = 120

_WHITESPACE = re.compile(r"\s+")
_UNSAFE_CHARS = re.compile(r"[^a-zA-Z0-9._-]")


def sanitize_filename(filename: str) -> str:
    trimmed = filename.strip()
    if not trimmed:
        return "file"
    safe = _UNSAFE_CHARS.sub("", _WHITESPACE.sub("-", trimmed))[:MAX_FILENAME_LENGTH]
    return safe or "file"


def release_prefix(release_id: UUID) -> str:
    return f"releases/{release_id}/"


def build_object_key(
    kind: AssetKind,
    release_id: UUID,
    filename: str,
    *,
    track_id: UUID | None = None,
    now: datetime | None = None,
) -> str:
    """Return the storage key an upload of ``filename`` should be written to."""

    stamp = int((now or datetime.now(tz=UTC)).timestamp() * 1000)
    safe_name = sanitize_filename(filename)
    prefix = release_prefix(release_id)
    if kind is AssetKind.COVER_ART:
        return f"{prefix}cover/{stamp}-{safe_name}"
    track_part = f"tracks/{track_id}" if track_id is not None else "tracks/unassigned"
    return f"{prefix}{track_part}/audio/{stamp}-{safe_name}"


def public_url_for(object_key: str, public_base_url: str | None) -> str | None:
    if public_base_url is None:
        return None
    base = public_base_url.strip().rstrip("/")
    if not base:
        return None
    return f"{base}/{object_key}"


def asset_for_release(
    release_id: UUID,
    object_key: str,
    *,
    public_url: str | None = None,
    public_base_url: str | None = None,
) -> AssetRef:
    """Build an ``AssetRef`` after checking the key belongs to ``release_id``.

    An explicit ``public_url`` wins over one derived from ``public_base_url``.
    Raises ``ValueError`` for keys outside the release prefix.
    """

    if not object_key.startswith(release_prefix(release_id)):
        raise ValueError("objectKey is not scoped to releaseId")
    url = public_url if public_url is not None else public_url_for(object_key, public_base_url)
    return AssetRef(object_key=object_key, public_url=url)
