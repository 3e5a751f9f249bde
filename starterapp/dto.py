"""Request/response envelopes, validation and small helpers."""

from __future__ import annotations

import dataclasses
import inspect
import json
import logging
from dataclasses import dataclass, field
from typing import Any, Optional, TypeVar

T = TypeVar("T")


def jsonable(value: Any) -> Any:
    """Turn objects with ``to_dict`` (and containers of them) into plain data."""
    if hasattr(value, "to_dict") and callable(value.to_dict):
        return value.to_dict()
    if isinstance(value, BaseException):
        return str(value)
    if isinstance(value, (list, tuple)):
        return [jsonable(item) for item in value]
    if isinstance(value, dict):
        return {key: jsonable(item) for key, item in value.items()}
    return value


class HttpError(Exception):
    """An HTTP error carrying a status code and message."""

    def __init__(self, code: int, message: str = "") -> None:
        super().__init__(message)
        self.code = code
        self.message = message

    def __str__(self) -> str:
        return self.message


@dataclass
class RequestDTO:
    tx_id: str = ""
    user: str = ""
    roles: list[str] = field(default_factory=list)


@dataclass
class RequestWithDataDTO:
    tx_id: str = ""
    user: str = ""
    roles: list[str] = field(default_factory=list)
    data: Any = None


@dataclass
class ErrorDTO:
    code: int
    message: Any = ""
    errors: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_error(cls, code: int, message: str, error: BaseException) -> "ErrorDTO":
        """Wrap an exception; its text goes under the ``code`` key."""
        return cls(code=code, message=message, errors={"code": str(error)})

    @classmethod
    def from_http_error(cls, error: HttpError) -> "ErrorDTO":
        """Wrap an HTTP error; its text goes under its status code."""
        return cls(
            code=error.code,
            message=error.message,
            errors={str(error.code): str(error)},
        )

    def to_dict(self) -> dict[str, Any]:
        return {"code": self.code, "message": self.message, "errors": jsonable(self.errors)}


@dataclass
class ResponseDTO:
    data: Any = None
    message: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {"data": jsonable(self.data), "message": self.message}


@dataclass
class ResponseOffsetDTO:
    data: Any = None
    message: str = ""
    total: int = 0
    limit: int = 0
    offset: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "data": jsonable(self.data),
            "limit": self.limit,
            "offset": self.offset,
            "total": self.total,
            "message": self.message,
        }


@dataclass(frozen=True)
class FieldError:
    """One failed validation rule."""

    failed_field: str
    tag: str
    value: str
    message: str

    def to_dict(self) -> dict[str, str]:
        return {
            "FailedField": self.failed_field,
            "Tag": self.tag,
            "Value": self.value,
            "Message": self.message,
        }


def _is_zero(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, (str, bytes, list, tuple, dict, set, frozenset)):
        return len(value) == 0
    if isinstance(value, (int, float)):
        return value == 0
    return False


class Validator:
    """Checks dataclass fields against rules declared in ``metadata["validate"]``."""

    def validate(self, obj: Any) -> list[FieldError]:
        if not dataclasses.is_dataclass(obj) or isinstance(obj, type):
            raise TypeError(f"cannot validate {type(obj).__name__}: not a dataclass instance")
        struct_name = type(obj).__name__
        failures: list[FieldError] = []
        for f in dataclasses.fields(obj):
            rules = [rule.strip() for rule in f.metadata.get("validate", "").split(",") if rule.strip()]
            value = getattr(obj, f.name)
            for rule in rules:
                tag, _, param = rule.partition("=")
                if tag == "required":
                    if _is_zero(value):
                        namespace = f"{struct_name}.{f.name}"
                        failures.append(
                            FieldError(
                                failed_field=namespace,
                                tag=tag,
                                value=param,
                                message=(
                                    f"Key: '{namespace}' Error:Field validation for "
                                    f"'{f.name}' failed on the '{tag}' tag"
                                ),
                            )
                        )
                else:
                    raise ValueError(f"undefined validation function '{tag}' on field '{f.name}'")
        return failures


def iif(condition: bool, x: T, y: T) -> T:
    """Return ``x`` when ``condition`` holds, otherwise ``y``."""
    return x if condition else y


def struct_to_dict(obj: Any) -> Optional[dict[str, Any]]:
    """Shallow mapping of a dataclass instance's fields; None for anything else."""
    if not dataclasses.is_dataclass(obj) or isinstance(obj, type):
        return None
    return {f.name: getattr(obj, f.name) for f in dataclasses.fields(obj)}


def log_error(logger: logging.Logger, param: Any, error: Optional[BaseException]) -> Optional[BaseException]:
    """Log ``error`` with the caller's location and ``param``; return the error."""
    if error is None:
        return None
    frame = inspect.currentframe()
    caller = frame.f_back if frame is not None else None
    try:
        file_name = caller.f_code.co_filename if caller else ""
        line = caller.f_lineno if caller else 0
    finally:
        del frame, caller
    payload = {"File": file_name, "Line": line, "Param": param, "Error": str(error)}
    logger.error(json.dumps(payload, default=str))
    return error