import pytest

from mailria_control.app.ui.forms import (
    PASSWORD_SYMBOLS,
    accepts_search_input,
    generate_random_password,
    validate_admin_create,
    validate_bulk_create,
    validate_password_change,
)


@pytest.mark.parametrize(
    ("new", "confirm", "admin", "error"),
    [
        ("", "", False, "Please provide a password."),
        ("secret1", "secret2", False, "Passwords do not match."),
        ("abc", "abc", False, "Password must be at least 6 characters long."),
        ("abcdefg", "abcdefg", True, "Password must be at least 8 characters long."),
        ("abcdefgh1", "abcdefgh1", True, "Password must include lowercase, uppercase, number and symbol."),
    ],
)
def test_password_change_errors(new, confirm, admin, error) -> None:
    result = validate_password_change(new, confirm, admin_tier=admin)

    assert result.is_valid is False
    assert result.first_error == error


def test_password_change_accepts_valid_inputs() -> None:
    assert validate_password_change("simple", "simple").is_valid
    assert validate_password_change("Str0ng!pw", "Str0ng!pw", admin_tier=True).is_valid


def test_admin_create_requires_username_and_strong_password() -> None:
    result = validate_admin_create("  ", "weak")

    assert set(result.field_errors) == {"username", "password"}
    assert validate_admin_create(" ops ", "Str0ng!pw").values["username"] == "ops"


@pytest.mark.parametrize(
    ("quantity", "password", "error"),
    [
        (5, "", "Please provide a password."),
        (1, "secret1", "Quantity must be between 2 and 100. Please try again."),
        (101, "secret1", "Quantity must be between 2 and 100. Please try again."),
        ("x", "secret1", "Quantity must be between 2 and 100. Please try again."),
        (5, "abc", "Password must be at least 6 characters long. Please try again."),
    ],
)
def test_bulk_create_errors(quantity, password, error) -> None:
    assert validate_bulk_create(quantity, password).first_error == error


def test_bulk_create_defaults_base_name() -> None:
    result = validate_bulk_create("10", "secret1", base_name="  ", send_to=" ops@mailria.com ")

    assert result.is_valid
    assert result.values == {"base_name": "random", "quantity": 10, "password": "secret1", "send_to": "ops@mailria.com"}


def test_search_input_filter() -> None:
    assert accepts_search_input("")
    assert accepts_search_input("alice.smith_01,bob")
    assert not accepts_search_input("alice@mailria.com")
    assert not accepts_search_input("a b")


def test_random_password_alphabet() -> None:
    password = generate_random_password()
    allowed = set("abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ0123456789" + PASSWORD_SYMBOLS)

    assert len(password) == 8
    assert set(password) <= allowed
