from __future__ import annotations

import pytest

from credential_gate.domain.credential_rules import (
    CredentialFields,
    CredentialPolicy,
    RejectionKind,
    ValidationKind,
    ValidationResult,
    is_space,
    is_valid_email,
    scan_password,
    validate_credentials,
)

VALID_EMAIL = "person@example.org"
VALID_USERNAME = "alice_01"
VALID_PASSWORD = "Abcde1!"


def _register(
    *,
    email: str = VALID_EMAIL,
    username: str = VALID_USERNAME,
    password: str = VALID_PASSWORD,
    policy: CredentialPolicy | None = None,
) -> ValidationResult:
    fields = CredentialFields(username=username, password=password, email=email)
    if policy is None:
        return validate_credentials(ValidationKind.REGISTRATION, fields)
    return validate_credentials(ValidationKind.REGISTRATION, fields, policy)


def test_valid_registration_is_accepted() -> None:
    result = _register()

    assert result.accepted is True
    assert result.rejection is None
    assert result.reason is None


@pytest.mark.parametrize("email", ["a@b.co", "first.last+tag@mail.example.com", "x%y@d-1.io"])
def test_well_formed_emails_are_accepted(email: str) -> None:
    assert is_valid_email(email) is True
    assert _register(email=email).accepted is True


@pytest.mark.parametrize(
    "email",
    ["a@b", "", "no-at-sign.com", "a@b.c", "a@b.c0", "a b@c.com", "a@b.co\n", "@b.co"],
)
def test_malformed_emails_are_rejected(email: str) -> None:
    result = _register(email=email)

    assert result.accepted is False
    assert result.rejection is RejectionKind.INVALID_EMAIL
    assert result.reason == "Invalid email"


def test_login_does_not_check_email() -> None:
    result = validate_credentials(
        ValidationKind.LOGIN,
        CredentialFields(username=VALID_USERNAME, password=VALID_PASSWORD),
    )

    assert result.accepted is True


def test_login_applies_username_and_password_rules() -> None:
    result = validate_credentials(
        ValidationKind.LOGIN,
        CredentialFields(username=VALID_USERNAME, password="Abcde1"),
    )

    assert result.rejection is RejectionKind.PASSWORD_COMPOSITION


@pytest.mark.parametrize("username", ["abcd", "a" * 16, "a" * 40, "", "日本語か"])
def test_username_outside_length_bounds_is_rejected(username: str) -> None:
    result = _register(username=username)

    assert result.rejection is RejectionKind.USERNAME_LENGTH
    assert result.reason == "Username length must be 5-15"


@pytest.mark.parametrize("username", ["abcde", "a" * 15, "日本語かな", "ñandú"])
def test_username_length_counts_code_points_not_bytes(username: str) -> None:
    assert _register(username=username).accepted is True


@pytest.mark.parametrize(
    "username",
    [
        "alice$",
        "bob+smith",
        "x=y=z1",
        "smile☺x",
        "caret^^",
        "with space",
        "tab\tname",
        "nbsp\u00a0x",
    ],
)
def test_username_with_symbol_or_whitespace_is_rejected(username: str) -> None:
    result = _register(username=username)

    assert result.rejection is RejectionKind.USERNAME_CHARS
    assert result.reason == "Username cannot have symbols or spaces"


@pytest.mark.parametrize(
    "username",
    ["alice_01", "bob-smith", "a.b.c.d", "who?!", "(paren)", "#tagged"],
)
def test_username_allows_punctuation(username: str) -> None:
    assert _register(username=username).accepted is True


@pytest.mark.parametrize("password", ["Ab1!", "Abcdefgh1!12345x", ""])
def test_password_outside_length_bounds_is_rejected(password: str) -> None:
    result = _register(password=password)

    assert result.rejection is RejectionKind.PASSWORD_LENGTH
    assert result.reason == "Password length must be 5-15"


@pytest.mark.parametrize(
    "password",
    ["Ab 1!x", "abcde fg", "Ab1!\tx", "Ab1!\u3000x", "Abc1!\n"],
)
def test_password_whitespace_is_rejected_before_composition(password: str) -> None:
    result = _register(password=password)

    assert result.rejection is RejectionKind.PASSWORD_WHITESPACE
    assert result.reason == "Password cannot contain spaces"


@pytest.mark.parametrize(
    ("password", "missing"),
    [
        ("Abcde1", "symbol"),
        ("abcde1!", "upper"),
        ("ABCDE1!", "lower"),
        ("Abcdef!", "number"),
        ("abcdefg", "upper, number, symbol"),
    ],
)
def test_password_missing_a_class_is_rejected_with_missing_list(
    password: str,
    missing: str,
) -> None:
    result = _register(password=password)

    assert result.rejection is RejectionKind.PASSWORD_COMPOSITION
    assert result.reason is not None
    assert result.reason.startswith("Password must contain upper, lower, number and symbol")
    assert f"(missing: {missing})" in result.reason


@pytest.mark.parametrize(
    "password",
    ["Abcde1!", "Abcde1$", "Ab€de1x", "Ab1_xyz", "ÄbçdÉ٣!"],
)
def test_symbols_and_punctuation_both_satisfy_the_symbol_class(password: str) -> None:
    assert _register(password=password).accepted is True


def test_unclassified_code_points_are_ignored_not_rejected() -> None:
    # U+65E5 is a letter without case: it sets no class flag.
    result = _register(password="Ab1!日")

    assert result.accepted is True


@pytest.mark.parametrize(
    "char",
    [" ", "\t", "\n", "\v", "\f", "\r", "\x85", "\u00a0", "\u1680", "\u2028", "\u2029", "\u3000"],
)
def test_is_space_matches_unicode_white_space(char: str) -> None:
    assert is_space(char) is True


@pytest.mark.parametrize("char", ["\x1c", "\x1d", "\x1e", "\x1f", "\x00", "a", "_", "\u200b"])
def test_is_space_excludes_other_controls_and_format_characters(char: str) -> None:
    assert is_space(char) is False


def test_information_separator_controls_are_not_treated_as_spaces() -> None:
    assert _register(username="ali\x1cce").accepted is True
    assert _register(password="Ab1!\x1fx").accepted is True


def test_line_and_paragraph_separators_are_treated_as_spaces() -> None:
    assert _register(username="ali\u2028ce").rejection is RejectionKind.USERNAME_CHARS
    assert _register(password="Ab1!\u2029x").rejection is RejectionKind.PASSWORD_WHITESPACE


def test_scan_password_returns_none_on_whitespace() -> None:
    assert scan_password("Ab1! ") is None


def test_scan_password_assigns_each_code_point_to_one_class() -> None:
    classes = scan_password("A")

    assert classes is not None
    assert classes.has_upper is True
    assert classes.missing() == ("lower", "number", "symbol")


def test_rules_are_evaluated_in_order_first_failure_wins() -> None:
    everything_wrong = _register(email="bad", username="x", password=" ")
    username_and_password_wrong = _register(username="x", password=" ")
    chars_and_password_wrong = _register(username="bad name", password=" ")
    password_length_and_space = _register(password=" ")

    assert everything_wrong.rejection is RejectionKind.INVALID_EMAIL
    assert username_and_password_wrong.rejection is RejectionKind.USERNAME_LENGTH
    assert chars_and_password_wrong.rejection is RejectionKind.USERNAME_CHARS
    assert password_length_and_space.rejection is RejectionKind.PASSWORD_LENGTH


def test_validation_is_deterministic() -> None:
    assert _register(password="Abcde1") == _register(password="Abcde1")


def test_custom_policy_bounds_apply() -> None:
    policy = CredentialPolicy(
        username_min_length=3,
        username_max_length=4,
        password_min_length=8,
        password_max_length=10,
    )

    assert _register(username="abc", password="Abcdef1!", policy=policy).accepted is True
    assert (
        _register(username="abcde", password="Abcdef1!", policy=policy).rejection
        is RejectionKind.USERNAME_LENGTH
    )
    short_password = _register(username="abc", password="Abcde1!", policy=policy)
    assert short_password.rejection is RejectionKind.PASSWORD_LENGTH
    assert short_password.reason == "Password length must be 8-10"


@pytest.mark.parametrize(
    "kwargs",
    [
        {"username_min_length": 0},
        {"password_min_length": -1},
        {"username_min_length": 10, "username_max_length": 9},
        {"password_min_length": 16, "password_max_length": 15},
    ],
)
def test_policy_rejects_invalid_bounds(kwargs: dict[str, int]) -> None:
    with pytest.raises(ValueError):
        CredentialPolicy(**kwargs)
