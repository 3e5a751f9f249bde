"""Lookup of user profiles by e-mail through the remote profile service."""

from __future__ import annotations

import json
import logging
from typing import Any, Optional

import requests
from flask import Blueprint

from .config import api_settings
from .dto import ErrorDTO
from .models import UserprofileResponse

_PREFIX = "Error GetUserProfileByEmail"
_HEADERS = {
    "Accept": "application/json;odata=verbose",
    "Content-Type": "application/json",
}


class UserprofileError(Exception):
    """Raised when a profile lookup fails; ``response`` holds any parsed body."""

    def __init__(self, message: str, response: Optional[UserprofileResponse] = None) -> None:
        super().__init__(message)
        self.response = response


def _format_errors(errors: list[Any]) -> str:
    return "[" + " ".join(str(item) for item in errors) + "]"


class UserprofileApi:
    """Client for the remote employee search endpoint."""

    def __init__(
        self,
        http: requests.Session,
        logger: logging.Logger,
        base_url: Optional[str] = None,
    ) -> None:
        self.http = http
        self.logger = logger
        self.base_url = api_settings().user_profile_base_url if base_url is None else base_url

    def get_user_profile_by_email(self, email: str) -> UserprofileResponse:
        url = f"{self.base_url}/employees/search/email?email={email}"
        try:
            res = self.http.get(url, headers=_HEADERS)
        except requests.RequestException as exc:
            raise UserprofileError(f"{_PREFIX} [Request]: {exc}") from exc

        if res.status_code != 200:
            raise UserprofileError(f"{_PREFIX} [StatusCode:{res.status_code}]: {res.text}")

        try:
            result = UserprofileResponse.from_dict(json.loads(res.content))
        except ValueError as exc:
            raise UserprofileError(f"{_PREFIX} [Unmarshal]: {exc}") from exc

        if result.errors:
            raise UserprofileError(
                f"{_PREFIX} [Result Error]: {_format_errors(result.errors)}", result
            )

        if not isinstance(result.data, dict) or not result.data:
            raise UserprofileError(f"{_PREFIX} [Check Length]: email not found data", result)

        self.logger.info(
            "Dependency %s type=%s target=%s success=%s",
            "Endpoint employees/search",
            "HTTP",
            url,
            True,
        )
        return result


class UserprofileService:
    """Business layer over the profile client."""

    def __init__(self, api: UserprofileApi) -> None:
        self.api = api

    def get_email(self, email: str) -> UserprofileResponse:
        return self.api.get_user_profile_by_email(email)


class UserprofileHandler:
    """Turns service results into HTTP response bodies and status codes."""

    def __init__(self, service: UserprofileService, logger: logging.Logger) -> None:
        self.service = service
        self.logger = logger

    def get_email(self, email: str) -> tuple[dict[str, Any], int]:
        try:
            res = self.service.get_email(email)
        except UserprofileError as exc:
            self.logger.error("%s", exc)
            return ErrorDTO.from_error(400, "", exc).to_dict(), 400

        try:
            data = json.dumps(res.data)
        except (TypeError, ValueError) as exc:
            self.logger.error("%s", exc)
            return ErrorDTO.from_error(500, "", exc).to_dict(), 500

        self.logger.info("GetEmail: %s", data)
        return res.to_dict(), 200


def create_userprofile_blueprint(api: UserprofileApi, logger: logging.Logger) -> Blueprint:
    """Blueprint serving ``GET /user-profile/email/<email>``."""
    handler = UserprofileHandler(UserprofileService(api), logger)
    blueprint = Blueprint("userprofile", __name__, url_prefix="/user-profile")

    @blueprint.get("/email/<email>")
    def get_email(email: str):
        return handler.get_email(email)

    return blueprint