"""Deterministic composition rules for submitted usernames, passwords, and emails."""

from __future__ import annotations

import re
import unicodedata
from dataclasses import dataclass
from enum import StrEnum
from typing import Final

DEFAULT_USERNAME_MIN_LENGTH: Final[int] = 5
DEFAULT_USERNAME_MAX_LENGTH: Final[int] = 15
DEFAULT_PASSWORD_MIN_LENGTH: Final[int] = 5
DEFAULT_PASSWORD_MAX_LENGTH: Final[int] = 15

_EMAIL_RE: Final[re.Pattern[str]] = re.compile(r"[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}")
_SYMBOL_CATEGORIES: Final[frozenset[str]] = frozenset({"Sm", "Sc", "Sk", "So"})
_NUMBER_CATEGORIES: Final[frozenset[str]] = frozenset({"Nd", "Nl", "No"})
_SPACE_CATEGORIES: Final[frozenset[str]] = frozenset({"Zs", "Zl", "Zp"})
_SPACE_CONTROLS: Final[frozenset[str]] = frozenset("\t\n\v\f\r\x85")


class ValidationKind(StrEnum):
    """Which rule set applies to one submission."""

    REGISTRATION = "registration"
    LOGIN = "login"


class RejectionKind(StrEnum):
    """Closed set of user-correctable rejection categories."""

    INVALID_EMAIL = "invalid_email"
    USERNAME_LENGTH = "username_length"
    USERNAME_CHARS = "username_chars"
    PASSWORD_LENGTH = "password_length"
    PASSWORD_WHITESPACE = "password_whitespace"
    PASSWORD_COMPOSITION = "password_composition"
    # Produced by the uniqueness check, never by validate_credentials.
    DUPLICATE_USERNAME = "duplicate_username"


def _require_bounds(field: str, minimum: int, maximum: int) -> None:
    if minimum <= 0:
        raise ValueError(f"{field} minimum length must be positive")
    if minimum > maximum:
        raise ValueError(f"{field} minimum length cannot exceed maximum length")


@dataclass(frozen=True)
class CredentialPolicy:
    """Length bounds, in code points, applied by the validator."""

    username_min_length: int = DEFAULT_USERNAME_MIN_LENGTH
    username_max_length: int = DEFAULT_USERNAME_MAX_LENGTH
    password_min_length: int = DEFAULT_PASSWORD_MIN_LENGTH
    password_max_length: int = DEFAULT_PASSWORD_MAX_LENGTH

    def __post_init__(self) -> None:
        _require_bounds("username", self.username_min_length, self.username_max_length)
        _require_bounds("password", self.password_min_length, self.password_max_length)


DEFAULT_POLICY: Final[CredentialPolicy] = CredentialPolicy()


@dataclass(frozen=True)
class CredentialFields:
    """Raw submitted fields; email is only present for registrations."""

    username: str
    password: str
    email: str | None = None


@dataclass(frozen=True)
class ValidationResult:
    """Either accepted, or rejected with exactly one kind and reason."""

    accepted: bool
    rejection: RejectionKind | None = None
    reason: str | None = None

    @classmethod
    def accept(cls) -> ValidationResult:
        return cls(accepted=True)

    @classmethod
    def reject(cls, rejection: RejectionKind, reason: str) -> ValidationResult:
        return cls(accepted=False, rejection=rejection, reason=reason)


def validate_credentials(
    kind: ValidationKind,
    fields: CredentialFields,
    policy: CredentialPolicy = DEFAULT_POLICY,
) -> ValidationResult:
    """Apply the ordered rule chain and return the first failure, if any.

    Order: email (registration only), username length, username characters,
    password length, password whitespace, password composition.
    """

    if kind is ValidationKind.REGISTRATION and not is_valid_email(fields.email or ""):
        return ValidationResult.reject(RejectionKind.INVALID_EMAIL, "Invalid email")

    username_length = len(fields.username)
    if not policy.username_min_length <= username_length <= policy.username_max_length:
        return ValidationResult.reject(
            RejectionKind.USERNAME_LENGTH,
            f"Username length must be {policy.username_min_length}-{policy.username_max_length}",
        )

    if any(_is_symbol(char) or is_space(char) for char in fields.username):
        return ValidationResult.reject(
            RejectionKind.USERNAME_CHARS,
            "Username cannot have symbols or spaces",
        )

    password_length = len(fields.password)
    if not policy.password_min_length <= password_length <= policy.password_max_length:
        return ValidationResult.reject(
            RejectionKind.PASSWORD_LENGTH,
            f"Password length must be {policy.password_min_length}-{policy.password_max_length}",
        )

    classes = scan_password(fields.password)
    if classes is None:
        return ValidationResult.reject(
            RejectionKind.PASSWORD_WHITESPACE,
            "Password cannot contain spaces",
        )

    missing = classes.missing()
    if missing:
        return ValidationResult.reject(
            RejectionKind.PASSWORD_COMPOSITION,
            "Password must contain upper, lower, number and symbol "
            f"(missing: {', '.join(missing)})",
        )

    return ValidationResult.accept()


@dataclass(frozen=True)
class PasswordClasses:
    """Character classes observed while scanning one password."""

    has_upper: bool = False
    has_lower: bool = False
    has_number: bool = False
    has_symbol: bool = False

    def missing(self) -> tuple[str, ...]:
        """Return labels of required classes that were never observed."""

        labels = (
            ("upper", self.has_upper),
            ("lower", self.has_lower),
            ("number", self.has_number),
            ("symbol", self.has_symbol),
        )
        return tuple(label for label, present in labels if not present)


def scan_password(password: str) -> PasswordClasses | None:
    """Classify each code point; return None as soon as whitespace is seen.

    A code point contributes to at most one class. Code points outside all
    four classes (for example letters without case) are ignored.
    """

    has_upper = has_lower = has_number = has_symbol = False
    for char in password:
        if is_space(char):
            return None
        category = unicodedata.category(char)
        if category == "Lu":
            has_upper = True
        elif category == "Ll":
            has_lower = True
        elif category in _NUMBER_CATEGORIES:
            has_number = True
        elif category[0] in ("P", "S"):
            has_symbol = True
    return PasswordClasses(
        has_upper=has_upper,
        has_lower=has_lower,
        has_number=has_number,
        has_symbol=has_symbol,
    )


def is_valid_email(email: str) -> bool:
    """Return whether email looks like local@domain.tld."""

    return _EMAIL_RE.fullmatch(email) is not None


def is_space(char: str) -> bool:
    """Return whether char is Unicode white space.

    Separators (Zs, Zl, Zp) plus the tab, newline, vertical tab, form feed,
    carriage return and next-line controls. Other control characters, such as
    the information separators U+001C to U+001F, are not white space.
    """

    return char in _SPACE_CONTROLS or unicodedata.category(char) in _SPACE_CATEGORIES


def _is_symbol(char: str) -> bool:
    # Punctuation (P*) is allowed in usernames; only symbols are banned.
    return unicodedata.category(char) in _SYMBOL_CATEGORIES
