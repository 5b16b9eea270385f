import json

import pytest

from common.config import ContactConfig, DEFAULT_ALLOWED_ORIGINS, POLICY_BEST_EFFORT, SINK_WEBHOOK
from common.exceptions import ConfigurationError

ENV_VARS = [
    "CONTACT_ALLOWED_ORIGINS", "CONTACT_DEFAULT_ORIGIN", "CONTACT_ALLOW_CREDENTIALS", "CONTACT_CORS_MAX_AGE",
    "CONTACT_SINK", "CONTACT_SINK_FAILURE_POLICY", "CONTACT_SINK_RETRIES", "CONTACT_SINK_TIMEOUT",
    "CONTACT_HONEYPOT_FIELD", "CONTACT_HEALTH_CHECK", "CONTACT_REQUIRE_VALID_EMAIL",
    "GOOGLE_SERVICE_ACCOUNT_KEY", "GOOGLE_CLIENT_EMAIL", "GOOGLE_PRIVATE_KEY",
    "SPREADSHEET_ID", "SHEET_NAME", "SHEET_RANGE", "CONTACT_WEBHOOK_URL",
]


@pytest.fixture
def clean_env(monkeypatch):
    monkeypatch.setattr("common.config.load_dotenv", lambda: None)
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


def test_from_env_defaults(clean_env):
    config = ContactConfig.from_env()

    assert config.allowed_origins == DEFAULT_ALLOWED_ORIGINS
    assert config.sink_type == "sheets"
    assert config.failure_policy == "strict"
    assert config.sink_retries == 0
    assert config.honeypot_field == "website"
    assert config.sheet_name == "Contact"
    assert config.health_check_enabled is True
    assert config.has_credentials is False


def test_from_env_overrides(clean_env):
    clean_env.setenv("CONTACT_ALLOWED_ORIGINS", "https://a.example, https://b.example,")
    clean_env.setenv("CONTACT_SINK", "Webhook")
    clean_env.setenv("CONTACT_SINK_FAILURE_POLICY", "best_effort")
    clean_env.setenv("CONTACT_SINK_RETRIES", "1")
    clean_env.setenv("CONTACT_ALLOW_CREDENTIALS", "true")
    clean_env.setenv("CONTACT_HEALTH_CHECK", "off")
    clean_env.setenv("CONTACT_WEBHOOK_URL", "https://script.google.com/macros/s/x/exec")

    config = ContactConfig.from_env()

    assert config.allowed_origins == ["https://a.example", "https://b.example"]
    assert config.sink_type == SINK_WEBHOOK
    assert config.failure_policy == POLICY_BEST_EFFORT
    assert config.sink_retries == 1
    assert config.allow_credentials is True
    assert config.health_check_enabled is False


@pytest.mark.parametrize("overrides", [
    {"sink_type": "ftp"},
    {"failure_policy": "sometimes"},
    {"sink_retries": 5},
    {"sink_retries": -1},
])
def test_invalid_values_fail_fast(overrides):
    with pytest.raises(ConfigurationError):
        ContactConfig(**overrides)


def test_credentials_from_json_key():
    key = json.dumps({"client_email": "svc@p.iam.gserviceaccount.com", "private_key": "line1\\nline2"})

    info = ContactConfig(service_account_key=key).credentials_info()

    assert info["client_email"] == "svc@p.iam.gserviceaccount.com"
    assert info["private_key"] == "line1\nline2"
    assert info["token_uri"] == "https://oauth2.googleapis.com/token"


def test_credentials_from_split_vars():
    config = ContactConfig(client_email="svc@p.iam.gserviceaccount.com", private_key="a\\nb")

    info = config.credentials_info()

    assert config.has_credentials
    assert info["type"] == "service_account"
    assert info["private_key"] == "a\nb"


@pytest.mark.parametrize("overrides", [
    {},
    {"service_account_key": "{not json"},
    {"service_account_key": "[]"},
    {"service_account_key": json.dumps({"client_email": "svc@p.iam.gserviceaccount.com"})},
    {"client_email": "svc@p.iam.gserviceaccount.com"},
])
def test_credentials_errors(overrides):
    with pytest.raises(ConfigurationError):
        ContactConfig(**overrides).credentials_info()
