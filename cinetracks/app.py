# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

import atexit

from flask import Flask

from cinetracks.infrastructure.container import Container
from cinetracks.shared.logging import logger, setup_logging
from cinetracks.shared.middleware.error_handler import configure_error_handling
from cinetracks.shared.middleware.request_logger import configure_request_logging


def create_app(container: Container | None = None) -> Flask:
    container = container or Container()
    config = container.config
    setup_logging(debug_mode=config.debug_logging)

    if container.uses_database:
        # Creates the schema on first use
        _ = container.engine

    app = Flask(__name__)
    app.config.update(SECRET_KEY=config.secret_key)
    app.extensions["cinetracks.container"] = container

    configure_error_handling(app)
    configure_request_logging(app)
    container.session_context.install(app)

    app.register_blueprint(container.misc_controller.as_blueprint())
    app.register_blueprint(container.session_controller.as_blueprint())
    app.register_blueprint(container.dashboard_controller.as_blueprint())
    app.register_blueprint(container.profile_controller.as_blueprint())
    app.register_blueprint(container.catalog_controller.as_blueprint())
    app.register_blueprint(container.watchlist_controller.as_blueprint())

    @app.after_request
    def _add_security_headers(resp):
        resp.headers.setdefault("X-Frame-Options", "DENY")
        resp.headers.setdefault("Referrer-Policy", "no-referrer")
        resp.headers.setdefault("X-Content-Type-Options", "nosniff")
        resp.headers.setdefault("Cache-Control", "no-store")
        if config.security.enable_hsts:
            resp.headers.setdefault(
                "Strict-Transport-Security",
                "max-age=31536000; includeSubDomains; preload",
            )
        return resp

    logger.info(
        f"Flask app initialized env={config.app_env} store={config.session.store}"
    )
    return app


if __name__ == "__main__":
    _container = Container()
    atexit.register(_container.shutdown)
    create_app(_container).run(host="0.0.0.0", port=5000, debug=False)
