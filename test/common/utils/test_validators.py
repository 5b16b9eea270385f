import pytest

from common.utils import env_flag, env_int, split_csv
from common.utils.validators import validate_email, sanitize_string


@pytest.mark.parametrize("email,expected", [
    ("jane@x.com", True),
    ("jane.doe+contact@mnmkstudio.com", True),
    ("jane", False),
    ("jane@", False),
    ("", False),
    (None, False),
    ("a" * 250 + "@x.com", False),
])
def test_validate_email(email, expected):
    assert validate_email(email) is expected


@pytest.mark.parametrize("value,max_length,expected", [
    ("  Hello, World!  ", None, "Hello, World!"),
    ("Too long", 5, "Too l"),
    (42, None, "42"),
    (None, None, ""),
    (True, None, ""),
    ({"a": 1}, None, ""),
])
def test_sanitize_string(value, max_length, expected):
    assert sanitize_string(value, max_length) == expected


def test_split_csv():
    assert split_csv(" a, b ,,c ") == ["a", "b", "c"]
    assert split_csv("") == []


def test_env_helpers(monkeypatch):
    monkeypatch.setenv("FLAG_ON", "Yes")
    monkeypatch.setenv("NUMBER", "12")
    monkeypatch.setenv("NOT_A_NUMBER", "twelve")
    monkeypatch.delenv("UNSET_FLAG", raising=False)

    assert env_flag("FLAG_ON") is True
    assert env_flag("UNSET_FLAG", default=True) is True
    assert env_int("NUMBER", 0) == 12
    assert env_int("NOT_A_NUMBER", 3) == 3
