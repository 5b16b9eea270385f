from typing import Dict, Any

from common.config import POLICY_BEST_EFFORT
from common.exceptions import InvalidEmailError, MissingFieldError, SinkError
from common.log import get_logger, info, warning, error
from common.utils.validators import validate_email

logger = get_logger(__name__)

ACK = {"status": "ok"}


def submit_contact_form(record, sink, config) -> Dict[str, Any]:
    """
    Process a contact form submission

    Args:
        record: the SubmissionRecord built from the request
        sink: where the submission gets recorded (Sheets or webhook)
        config: the ContactConfig in effect

    Returns:
        Dict acknowledging the submission

    Raises:
        MissingFieldError / InvalidEmailError: the submission is rejected (400)
        ConfigurationError: the sink is not fully configured (500)
        SinkError: the sink failed and the failure policy is strict (500)
    """
    # Bots get the same answer as people, they just never reach the sheet
    if record.is_spam:
        dropped = record.serialize()
        dropped.pop("message", None)
        warning(logger, "Honeypot field filled, dropping submission",
                honeypot_field=config.honeypot_field, submission=dropped)
        return dict(ACK)

    missing = record.missing_fields()
    if missing:
        warning(logger, "Missing required fields in contact form", missing=",".join(missing))
        raise MissingFieldError(missing)

    if config.require_valid_email and not validate_email(record.email):
        warning(logger, "Invalid email in contact form")
        raise InvalidEmailError(record.email)

    sink.check_config()

    try:
        _send_with_retry(record, sink, config.sink_retries)
    except SinkError as e:
        if config.failure_policy == POLICY_BEST_EFFORT:
            warning(logger, "Sink failed, acknowledging submission anyway",
                    sink=sink.name, reason=e.message)
            return dict(ACK)
        raise

    info(logger, "Recorded contact form submission", sink=sink.name)
    return dict(ACK)


def _send_with_retry(record, sink, retries):
    attempts = 1 + max(retries, 0)
    for attempt in range(1, attempts + 1):
        try:
            return sink.send(record)
        except SinkError as e:
            error(logger, "Sink call failed", sink=sink.name, attempt=attempt,
                  attempts=attempts, reason=e.message)
            if attempt == attempts:
                raise


def health_status(sink, config) -> Dict[str, Any]:
    """Configuration presence as booleans only, never the values."""
    return {
        "status": "ok" if not sink.missing_config() else "misconfigured",
        "sink": sink.name,
        "policy": config.failure_policy,
        "config": {
            "credentials": config.has_credentials,
            "spreadsheet_id": bool(config.spreadsheet_id),
            "sheet_name": bool(config.sheet_name),
            "webhook_url": bool(config.webhook_url),
            "allowed_origins": bool(config.allowed_origins),
        },
    }
