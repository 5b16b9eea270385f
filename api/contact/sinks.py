"""
Destinations for contact submissions.

Two variants sit behind the same interface: appending a row straight to the
Google Sheet with a service account, or relaying the form to an Apps Script
web app that does the append on its side.
"""
from typing import Any, Dict, List
from urllib.parse import quote

import requests
from google.auth.exceptions import GoogleAuthError
from google.auth.transport.requests import AuthorizedSession
from google.oauth2 import service_account

from common.config import SINK_SHEETS, SINK_WEBHOOK
from common.exceptions import ConfigurationError, SinkError
from common.log import get_logger, info

logger = get_logger(__name__)

SHEETS_SCOPES = ["https://www.googleapis.com/auth/spreadsheets"]
SHEETS_APPEND_URL = "https://sheets.googleapis.com/v4/spreadsheets/{spreadsheet_id}/values/{range}:append"


class Sink:
    name = "sink"

    def __init__(self, config):
        self.config = config

    def missing_config(self) -> List[str]:
        return []

    def check_config(self) -> None:
        missing = self.missing_config()
        if missing:
            raise ConfigurationError(f"{self.name} sink is missing configuration: {', '.join(missing)}")

    def send(self, record) -> Dict[str, Any]:
        raise NotImplementedError


class SheetsAppendSink(Sink):
    """Append one row per submission to a Google Sheet tab."""

    name = SINK_SHEETS

    def missing_config(self) -> List[str]:
        missing = []
        if not self.config.has_credentials:
            missing.append("GOOGLE_SERVICE_ACCOUNT_KEY")
        if not self.config.spreadsheet_id:
            missing.append("SPREADSHEET_ID")
        if not self.config.sheet_name:
            missing.append("SHEET_NAME")
        return missing

    @property
    def range(self) -> str:
        return f"{self.config.sheet_name}!{self.config.sheet_range}"

    def _session(self) -> AuthorizedSession:
        creds = service_account.Credentials.from_service_account_info(
            self.config.credentials_info(), scopes=SHEETS_SCOPES)
        return AuthorizedSession(creds)

    def send(self, record) -> Dict[str, Any]:
        try:
            session = self._session()
        except ValueError as e:
            # malformed private key material
            raise ConfigurationError(f"Invalid service account credential: {e}") from e

        url = SHEETS_APPEND_URL.format(
            spreadsheet_id=quote(self.config.spreadsheet_id, safe=""),
            range=quote(self.range, safe="!"),
        )
        params = {
            "valueInputOption": "RAW",
            "insertDataOption": "INSERT_ROWS",
        }
        try:
            response = session.post(url, params=params, json={"values": [record.to_row()]},
                                    timeout=self.config.sink_timeout)
        except (requests.exceptions.RequestException, GoogleAuthError) as e:
            raise SinkError(self.name, str(e)) from e
        finally:
            session.close()

        if not response.ok:
            raise SinkError(self.name, f"append returned HTTP {response.status_code}: {response.text[:500]}")

        try:
            result = response.json()
        except ValueError:
            result = {}
        updates = result.get("updates", {})
        info(logger, "Appended contact row", sheet_range=updates.get("updatedRange", self.range))
        return updates


class WebhookRelaySink(Sink):
    """Forward name/email/phone/message to an Apps Script web app as a form post."""

    name = SINK_WEBHOOK

    def missing_config(self) -> List[str]:
        return [] if self.config.webhook_url else ["CONTACT_WEBHOOK_URL"]

    def send(self, record) -> Dict[str, Any]:
        try:
            # Apps Script answers with a 302 to script.googleusercontent.com
            response = requests.post(self.config.webhook_url, data=record.to_relay_form(),
                                     timeout=self.config.sink_timeout, allow_redirects=True)
        except requests.exceptions.RequestException as e:
            raise SinkError(self.name, str(e)) from e

        if not response.ok:
            raise SinkError(self.name, f"webhook returned HTTP {response.status_code}")

        try:
            result = response.json()
        except ValueError:
            raise SinkError(self.name, "webhook did not return JSON")

        if not isinstance(result, dict) or not webhook_succeeded(result):
            detail = result.get("error") or result.get("message") if isinstance(result, dict) else None
            raise SinkError(self.name, detail or "webhook reported failure")

        info(logger, "Relayed contact submission to webhook")
        return result


def webhook_succeeded(result: Dict[str, Any]) -> bool:
    if result.get("ok") is True:
        return True
    return result.get("status") == "ok" or result.get("result") == "success"


SINKS = {
    SINK_SHEETS: SheetsAppendSink,
    SINK_WEBHOOK: WebhookRelaySink,
}


def build_sink(config) -> Sink:
    try:
        sink_class = SINKS[config.sink_type]
    except KeyError:
        raise ConfigurationError(f"Unknown sink type {config.sink_type!r}")
    return sink_class(config)
