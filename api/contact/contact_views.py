from flask import Blueprint, current_app, jsonify, request
from werkzeug.exceptions import HTTPException
from common.log import get_logger, exception, error
from common.exceptions import ConfigurationError, MethodNotAllowedError, SinkError, ValidationError
from api.contact.contact_service import submit_contact_form, health_status
from api.contact.cors import allowed_methods
from model.submission import SubmissionRecord

logger = get_logger(__name__)
bp = Blueprint('contact', __name__, url_prefix='/api')

# Every verb is routed here so the 405 comes from this blueprint's JSON error handler
ALL_METHODS = ["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]

FORM_MIMETYPES = ("application/x-www-form-urlencoded", "multipart/form-data")

INTERNAL_ERROR = {"error": "Internal error"}


def _contact():
    return current_app.extensions["contact"]


def _request_payload():
    """JSON body (sendBeacon posts it as text/plain), or form fields."""
    if request.mimetype in FORM_MIMETYPES:
        return request.form.to_dict()
    data = request.get_json(force=True, silent=True)
    return data if isinstance(data, dict) else {}


@bp.route("/contact", methods=ALL_METHODS, provide_automatic_options=False)
def handle_contact_form():
    """
    API endpoint for contact form submissions from the marketing site.

    Expected JSON (or form-encoded) payload:
    {
        "full_name": "Jane Doe",
        "email": "jane@example.com",
        "phone": "5551234",
        "country_code": "+1",
        "message": "Hello",
        "meta": {"page": "...", "referrer": "...", "userAgent": "...", "cid": "..."},
        "website": ""
    }

    Returns:
        204 for preflight, {"status": "ok"} on success, {"error": ...} otherwise
    """
    contact = _contact()
    config = contact["config"]

    if request.method == "OPTIONS":
        return "", 204

    if request.method == "GET" and config.health_check_enabled and request.args.get("health"):
        return jsonify(health_status(contact["sink"], config)), 200

    if request.method != "POST":
        raise MethodNotAllowedError(request.method)

    record = SubmissionRecord.from_payload(
        _request_payload(),
        headers=request.headers,
        remote_addr=request.remote_addr,
        honeypot_field=config.honeypot_field,
    )
    result = submit_contact_form(record, contact["sink"], config)
    return jsonify(result), 200


@bp.errorhandler(ValidationError)
def handle_validation_error(e):
    return jsonify({"error": e.message}), 400


@bp.errorhandler(MethodNotAllowedError)
def handle_method_not_allowed(e):
    logger.info("Rejected %s on contact endpoint", e.method)
    response = jsonify({"error": e.message})
    response.headers["Allow"] = ", ".join(allowed_methods(_contact()["config"]))
    return response, 405


@bp.errorhandler(ConfigurationError)
def handle_configuration_error(e):
    error(logger, "Contact endpoint is misconfigured", reason=e.message)
    return jsonify(INTERNAL_ERROR), 500


@bp.errorhandler(SinkError)
def handle_sink_error(e):
    error(logger, "Contact submission could not be recorded", sink=e.sink_name, reason=e.message)
    return jsonify(INTERNAL_ERROR), 500


@bp.errorhandler(HTTPException)
def handle_http_error(e):
    return jsonify({"error": e.description}), e.code


@bp.errorhandler(Exception)
def handle_unexpected_error(e):
    exception(logger, "Error processing contact form", exc_info=e)
    return jsonify(INTERNAL_ERROR), 500
