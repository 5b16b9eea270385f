##########################################
# External Modules
##########################################

from flask import Flask
from flask_talisman import Talisman
from common.config import ContactConfig
from common.log import get_logger

logger = get_logger("contact_api")


def create_app(config=None, sink=None):
    """
    Build the Flask app.

    Args:
        config: ContactConfig; read from the environment when omitted
        sink: Sink override, otherwise chosen from config.sink_type
    """
    from api.contact.cors import init_cors
    from api.contact.sinks import build_sink

    ##########################################
    # Configuration
    ##########################################

    config = config or ContactConfig.from_env()
    sink = sink or build_sink(config)

    missing = sink.missing_config()
    if missing:
        # Requests will answer 500 until this is fixed
        logger.warning("Contact sink %s is missing configuration: %s", sink.name, ", ".join(missing))

    ##########################################
    # Flask App Instance
    ##########################################

    app = Flask(__name__, instance_relative_config=True)
    app.extensions["contact"] = {
        "config": config,
        "sink": sink,
    }
    logger.info("Started Flask with %s sink, %s failure policy", sink.name, config.failure_policy)

    ##########################################
    # HTTP Security Headers
    ##########################################

    csp = {
        'default-src': '\'none\'',
        'frame-ancestors': '\'none\''
    }

    Talisman(
        app,
        force_https=False,
        frame_options='DENY',
        content_security_policy=csp,
        referrer_policy='no-referrer',
        x_content_type_options=True
    )

    @app.after_request
    def add_headers(response):
        response.headers['Cache-Control'] = 'no-store, max-age=0, must-revalidate'
        response.headers['Pragma'] = 'no-cache'
        response.headers['Expires'] = '0'
        return response

    ##########################################
    # CORS
    ##########################################

    init_cors(app, config)

    ##########################################
    # Blueprint Registration
    ##########################################

    from api.contact import contact_views

    app.register_blueprint(contact_views.bp)

    return app
