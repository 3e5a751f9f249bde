"""Swagger 2.0 description of the HTTP API."""

from __future__ import annotations

import json
from typing import Any, Iterable, Optional

TITLE = "Starter API"
VERSION = "1.0"
DESCRIPTION = "This is a sample API with Bearer Auth"
HOST = "api.example.com"
BASE_PATH = "/starter-api/v2"
SCHEMES = ["https"]

_MEDIA_TYPE = "application/json"


def _ref(name: str) -> dict[str, Any]:
    return {"$ref": f"#/definitions/{name}"}


def _typed(kind: str) -> dict[str, Any]:
    return {"type": kind}


def _free_object() -> dict[str, Any]:
    return {"type": "object", "additionalProperties": True}


def _object(properties: dict[str, Any], required: Iterable[str] = ()) -> dict[str, Any]:
    schema: dict[str, Any] = {"type": "object"}
    required = list(required)
    if required:
        schema["required"] = required
    schema["properties"] = properties
    return schema


def _replies(ok_schema: dict[str, Any], with_bad_request: bool = True) -> dict[str, Any]:
    replies: dict[str, Any] = {"200": {"description": "OK", "schema": ok_schema}}
    if with_bad_request:
        replies["400"] = {"description": "Bad Request", "schema": _ref("utils.ErrorDTO")}
    return replies


def _operation(
    tag: str,
    summary: str,
    description: str,
    replies: dict[str, Any],
    parameters: Optional[list[dict[str, Any]]] = None,
) -> dict[str, Any]:
    op: dict[str, Any] = {
        "security": [{"BearerAuth": []}],
        "description": description,
        "consumes": [_MEDIA_TYPE],
        "produces": [_MEDIA_TYPE],
        "tags": [tag],
        "summary": summary,
    }
    if parameters is not None:
        op["parameters"] = parameters
    op["responses"] = replies
    return op


def _paths() -> dict[str, Any]:
    customer_body = {
        "description": "Customer Insert Request",
        "name": "customer",
        "in": "body",
        "required": True,
        "schema": _ref("model.CustomerInsertRequest"),
    }
    email_param = {
        "type": "string",
        "description": "User Email",
        "name": "email",
        "in": "path",
        "required": True,
    }
    customer_reply = _ref("model.CustomerResponse")
    return {
        "/customer": {
            "get": _operation("Customer", "Get all customers", "Get all customers", _replies(customer_reply)),
            "post": _operation(
                "Customer",
                "Insert a new customer",
                "Insert a new customer into the system",
                _replies(_ref("model.CustomerResponse")),
                [customer_body],
            ),
        },
        "/health-check": {
            "get": _operation(
                "Common",
                "Health Check",
                "Returns the health status of the application along with some environment details.",
                _replies(_free_object(), with_bad_request=False),
            ),
        },
        "/user-profile/email/{email}": {
            "get": _operation(
                "Userprofile",
                "Get user email",
                "Get user email by email parameter",
                _replies(_ref("model.UserprofileResponse")),
                [email_param],
            ),
        },
    }


def _definitions() -> dict[str, Any]:
    customer_fields = ("email", "firstName", "lastName", "phone")
    return {
        "model.CustomerInsertRequest": _object(
            {name: _typed("string") for name in customer_fields},
            required=("firstName", "lastName"),
        ),
        "model.CustomerResponse": _object({"data": {}, "errors": {}, "message": _typed("string")}),
        "model.UserprofileResponse": _object(
            {"data": {}, "errors": {"type": "array", "items": {}}, "message": _typed("string")}
        ),
        "utils.ErrorDTO": _object({"code": _typed("integer"), "errors": _free_object(), "message": {}}),
    }


def _build_document() -> dict[str, Any]:
    return {
        "schemes": list(SCHEMES),
        "swagger": "2.0",
        "info": {"description": DESCRIPTION, "title": TITLE, "contact": {}, "version": VERSION},
        "host": HOST,
        "basePath": BASE_PATH,
        "paths": _paths(),
        "definitions": _definitions(),
        "securityDefinitions": {
            "BearerAuth": {
                "description": 'Bearer token (e.g., "Bearer <token>")',
                "type": "apiKey",
                "name": "Authorization",
                "in": "header",
            }
        },
    }


def swagger_document() -> dict[str, Any]:
    """Return a fresh copy of the Swagger document."""
    return _build_document()


def swagger_json() -> str:
    """Return the Swagger document serialised as JSON."""
    return json.dumps(_build_document(), indent=4)