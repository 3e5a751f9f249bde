"""The HTTP application and its command-line entry point."""

from __future__ import annotations

import argparse
import logging
from typing import Optional, Sequence

import requests
from flask import Flask, Response, request
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker

from .config import ApiSettings, api_settings
from .customer import create_customer_blueprint
from .db import create_db_engine
from .dto import ErrorDTO
from .events import create_events_blueprint
from .userprofile import UserprofileApi, create_userprofile_blueprint

CORS_ALLOW_METHODS = "GET,POST,HEAD,PUT,DELETE,PATCH"


def _is_http_exception(exc: Exception) -> bool:
    return isinstance(getattr(exc, "code", None), int) and callable(getattr(exc, "get_response", None))


def create_app(
    settings: ApiSettings,
    engine: Engine,
    http_session: requests.Session,
    logger: logging.Logger,
) -> Flask:
    """Build the Flask application with its middleware and routes."""
    app = Flask(__name__)
    app.config["APP_NAME"] = settings.module_name
    session_factory = sessionmaker(bind=engine)

    @app.before_request
    def _favicon_and_preflight():
        if request.path == "/favicon.ico" and request.method in ("GET", "HEAD"):
            return Response(status=204)
        if request.method == "OPTIONS":
            response = Response(status=204)
            response.headers["Access-Control-Allow-Origin"] = "*"
            response.headers["Access-Control-Allow-Methods"] = CORS_ALLOW_METHODS
            requested = request.headers.get("Access-Control-Request-Headers")
            if requested:
                response.headers["Access-Control-Allow-Headers"] = requested
            return response
        return None

    @app.after_request
    def _cors_and_log(response: Response) -> Response:
        response.headers.setdefault("Access-Control-Allow-Origin", "*")
        logger.info("%s | %s | %s", response.status_code, request.method, request.path)
        return response

    @app.errorhandler(Exception)
    def _recover(exc: Exception):
        if _is_http_exception(exc):
            return exc
        logger.exception("Recovered from error: %s", exc)
        return ErrorDTO.from_error(500, "", exc).to_dict(), 500

    prefix = settings.path_prefix.rstrip("/")
    userprofile_api = UserprofileApi(http_session, logger, base_url=settings.user_profile_base_url)
    for blueprint in (
        create_customer_blueprint(session_factory, logger),
        create_events_blueprint(session_factory, logger),
        create_userprofile_blueprint(userprofile_api, logger),
    ):
        app.register_blueprint(blueprint, url_prefix=f"{prefix}{blueprint.url_prefix}")

    return app


def _port(value: str) -> int:
    return int(value) if value else 0


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Serve the API on the configured port."""
    parser = argparse.ArgumentParser(description="Run the starter HTTP API.")
    parser.add_argument("--host", default="0.0.0.0", help="address to listen on")
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.INFO)
    settings = api_settings()
    logger = logging.getLogger(settings.module_name or "starterapp")
    engine = create_db_engine(settings)
    http_session = requests.Session()
    process = f"Start Project | Listen Port:{settings.port}"
    try:
        app = create_app(settings, engine, http_session, logger)
        logger.info(process)
        try:
            app.run(host=args.host, port=_port(settings.port))
        except (OSError, ValueError) as exc:
            logger.error("%s | %s", process, exc)
            return 1
    finally:
        http_session.close()
        engine.dispose()
    return 0