"""Folder identifier generation."""

import secrets
import string
from collections.abc import Collection

ALPHABET = string.ascii_letters + string.digits
SEGMENT_LENGTH = 5


def _segment(length: int = SEGMENT_LENGTH) -> str:
    return "".join(secrets.choice(ALPHABET) for _ in range(length))


def generate_folder_id(existing: Collection[str] | None = None) -> str:
    """Generate a folder ID of the form ``xxxxx-xxxxx``.

    Without ``existing`` no collision check is made. When the caller passes the
    daemon's current folder IDs, candidates are drawn until one is unused.
    """
    while True:
        candidate = f"{_segment()}-{_segment()}"
        if not existing or candidate not in existing:
            return candidate
