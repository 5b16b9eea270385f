from flask import request
from flask_cors import CORS

from common.log import get_logger

logger = get_logger(__name__)

ALLOW_HEADERS = ["Content-Type", "Authorization"]


def allowed_methods(config):
    """Verbs the contact endpoint answers without a 405."""
    methods = ["POST", "OPTIONS"]
    if config.health_check_enabled:
        methods.insert(0, "GET")
    return methods


def init_cors(app, config):
    """
    Attach the origin allow-list to /api/*.

    flask_cors echoes an allowed Origin and leaves disallowed ones alone. On
    top of that every response carries Vary: Origin, and a disallowed origin
    gets CONTACT_DEFAULT_ORIGIN when one is configured.
    """

    # Registered before CORS() so it runs after flask_cors' own hook
    @app.after_request
    def add_default_origin(response):
        if not request.path.startswith("/api/"):
            return response
        response.vary.add("Origin")
        if config.default_origin and "Access-Control-Allow-Origin" not in response.headers:
            response.headers["Access-Control-Allow-Origin"] = config.default_origin
        return response

    if config.wildcard_origin:
        logger.debug(
            "Using wildcard for CORS allowed origins - pretty dangerous, just for development purposes only")
    else:
        logger.debug(f"Using {config.allowed_origins} for CORS allowed origins")

    CORS(
        app,
        resources={r"/api/.*": {"origins": config.allowed_origins}},
        allow_headers=ALLOW_HEADERS,
        methods=allowed_methods(config),
        supports_credentials=config.allow_credentials,
        # Browsers reject "*" on credentialed requests, so the origin is echoed instead
        send_wildcard=config.wildcard_origin and not config.allow_credentials,
        always_send=False,
        vary_header=True,
        max_age=config.max_age,
    )
