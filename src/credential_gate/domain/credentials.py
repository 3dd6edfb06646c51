"""Shared normalization helpers for account credential keys."""

from __future__ import annotations

import unicodedata


def normalize_username(*, username: str) -> str:
    """Return the case-insensitive storage key for one username.

    Usernames are compared after NFC normalization and case folding, so
    ``Alice`` and ``alice`` resolve to the same account.
    """

    if not username:
        raise ValueError("username cannot be blank")
    return unicodedata.normalize("NFC", username).casefold()


def normalize_user_email(*, email: str) -> str:
    """Normalize one user email and reject blank values."""

    normalized = email.strip().lower()
    if not normalized:
        raise ValueError("email cannot be blank")
    return normalized
