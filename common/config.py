import json
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from dotenv import load_dotenv

from common.exceptions import ConfigurationError
from common.utils import safe_get_env_var, env_flag, env_int, split_csv

SINK_SHEETS = "sheets"
SINK_WEBHOOK = "webhook"
SINK_TYPES = (SINK_SHEETS, SINK_WEBHOOK)

POLICY_STRICT = "strict"
POLICY_BEST_EFFORT = "best_effort"
FAILURE_POLICIES = (POLICY_STRICT, POLICY_BEST_EFFORT)

DEFAULT_ALLOWED_ORIGINS = [
    "https://mnmkstudio.com",
    "https://www.mnmkstudio.com",
]

MAX_SINK_RETRIES = 1


@dataclass
class ContactConfig:
    """Everything the contact handler needs, resolved once per process."""

    allowed_origins: List[str] = field(default_factory=lambda: list(DEFAULT_ALLOWED_ORIGINS))
    default_origin: str = ""
    allow_credentials: bool = False
    max_age: int = 86400

    sink_type: str = SINK_SHEETS
    failure_policy: str = POLICY_STRICT
    sink_retries: int = 0
    sink_timeout: int = 10

    honeypot_field: str = "website"
    health_check_enabled: bool = True
    require_valid_email: bool = False

    service_account_key: str = ""
    client_email: str = ""
    private_key: str = ""
    spreadsheet_id: str = ""
    sheet_name: str = "Contact"
    sheet_range: str = "A1"

    webhook_url: str = ""

    def __post_init__(self):
        if self.sink_type not in SINK_TYPES:
            raise ConfigurationError(f"Unknown sink type {self.sink_type!r}, expected one of {SINK_TYPES}")
        if self.failure_policy not in FAILURE_POLICIES:
            raise ConfigurationError(
                f"Unknown failure policy {self.failure_policy!r}, expected one of {FAILURE_POLICIES}")
        if not 0 <= self.sink_retries <= MAX_SINK_RETRIES:
            raise ConfigurationError(f"sink_retries must be between 0 and {MAX_SINK_RETRIES}")

    @classmethod
    def from_env(cls) -> "ContactConfig":
        load_dotenv()
        origins = safe_get_env_var("CONTACT_ALLOWED_ORIGINS")
        return cls(
            allowed_origins=split_csv(origins) if origins else list(DEFAULT_ALLOWED_ORIGINS),
            default_origin=safe_get_env_var("CONTACT_DEFAULT_ORIGIN"),
            allow_credentials=env_flag("CONTACT_ALLOW_CREDENTIALS"),
            max_age=env_int("CONTACT_CORS_MAX_AGE", 86400),
            sink_type=safe_get_env_var("CONTACT_SINK", SINK_SHEETS).lower(),
            failure_policy=safe_get_env_var("CONTACT_SINK_FAILURE_POLICY", POLICY_STRICT).lower(),
            sink_retries=env_int("CONTACT_SINK_RETRIES", 0),
            sink_timeout=env_int("CONTACT_SINK_TIMEOUT", 10),
            honeypot_field=safe_get_env_var("CONTACT_HONEYPOT_FIELD", "website"),
            health_check_enabled=env_flag("CONTACT_HEALTH_CHECK", True),
            require_valid_email=env_flag("CONTACT_REQUIRE_VALID_EMAIL"),
            service_account_key=safe_get_env_var("GOOGLE_SERVICE_ACCOUNT_KEY"),
            client_email=safe_get_env_var("GOOGLE_CLIENT_EMAIL"),
            private_key=safe_get_env_var("GOOGLE_PRIVATE_KEY"),
            spreadsheet_id=safe_get_env_var("SPREADSHEET_ID"),
            sheet_name=safe_get_env_var("SHEET_NAME", "Contact"),
            sheet_range=safe_get_env_var("SHEET_RANGE", "A1"),
            webhook_url=safe_get_env_var("CONTACT_WEBHOOK_URL"),
        )

    @property
    def wildcard_origin(self) -> bool:
        return "*" in self.allowed_origins

    @property
    def has_credentials(self) -> bool:
        return bool(self.service_account_key or (self.client_email and self.private_key))

    def credentials_info(self) -> Dict[str, Any]:
        """
        Service-account info for google-auth, from the JSON key or the
        email + private key pair. Raises ConfigurationError when neither is usable.
        """
        if self.service_account_key:
            try:
                info = json.loads(self.service_account_key)
            except ValueError as e:
                raise ConfigurationError(f"GOOGLE_SERVICE_ACCOUNT_KEY is not valid JSON: {e}") from e
            if not isinstance(info, dict):
                raise ConfigurationError("GOOGLE_SERVICE_ACCOUNT_KEY must be a JSON object")
        elif self.client_email and self.private_key:
            info = {
                "type": "service_account",
                "client_email": self.client_email,
                "private_key": self.private_key,
                "token_uri": "https://oauth2.googleapis.com/token",
            }
        else:
            raise ConfigurationError("No service account credential configured")

        client_email: Optional[str] = info.get("client_email")
        private_key: Optional[str] = info.get("private_key")
        if not client_email or not private_key:
            raise ConfigurationError("Service account credential is missing client_email or private_key")

        # Keys pasted into env vars usually carry literal "\n" sequences
        info = dict(info)
        info["private_key"] = private_key.replace("\\n", "\n")
        info.setdefault("token_uri", "https://oauth2.googleapis.com/token")
        return info
