"""Request and response bodies exchanged by the HTTP API."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Generic, Mapping, Optional, TypeVar

from .dto import jsonable

T = TypeVar("T")

_MISSING = object()


def _mapping(data: Any) -> Mapping[str, Any]:
    if not isinstance(data, Mapping):
        raise ValueError("request body must be a JSON object")
    return data


def _string(data: Mapping[str, Any], key: str, default: Optional[str] = "") -> Optional[str]:
    value = data.get(key)
    if value is None:
        return default
    if not isinstance(value, str):
        raise ValueError(f"field '{key}' must be a string")
    return value


def _integer(data: Mapping[str, Any], key: str) -> int:
    value = data.get(key)
    if value is None:
        return 0
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"field '{key}' must be an integer")
    return value


def _integer_list(data: Mapping[str, Any], key: str) -> list[int]:
    value = data.get(key)
    if value is None:
        return []
    if not isinstance(value, list) or any(isinstance(v, bool) or not isinstance(v, int) for v in value):
        raise ValueError(f"field '{key}' must be a list of integers")
    return list(value)


@dataclass
class CustomerInsertRequest:
    first_name: str = field(default="", metadata={"validate": "required"})
    last_name: str = field(default="", metadata={"validate": "required"})
    email: Optional[str] = None
    phone: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Any) -> "CustomerInsertRequest":
        body = _mapping(data)
        return cls(
            first_name=_string(body, "firstName"),
            last_name=_string(body, "lastName"),
            email=_string(body, "email", None),
            phone=_string(body, "phone", None),
        )


@dataclass
class EventsInsertRequest:
    event_name: str = ""
    price: int = 0
    max_participant: int = 0

    @classmethod
    def from_dict(cls, data: Any) -> "EventsInsertRequest":
        body = _mapping(data)
        return cls(
            event_name=_string(body, "eventName"),
            price=_integer(body, "price"),
            max_participant=_integer(body, "maxParticipant"),
        )


@dataclass
class EventsUpdateRequest:
    event_name: str = ""
    price: int = 0

    @classmethod
    def from_dict(cls, data: Any) -> "EventsUpdateRequest":
        body = _mapping(data)
        return cls(event_name=_string(body, "eventName"), price=_integer(body, "price"))


@dataclass
class EnrollEventsRequest:
    participant_ids: list[int] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Any) -> "EnrollEventsRequest":
        body = _mapping(data)
        return cls(participant_ids=_integer_list(body, "participantIds"))


@dataclass
class ApiResponse(Generic[T]):
    """Standard envelope with data, message and errors."""

    data: Optional[T] = None
    message: str = ""
    errors: Any = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "errors": jsonable(self.errors),
            "message": self.message,
            "data": jsonable(self.data),
        }


@dataclass
class UserprofileResponse:
    errors: Optional[list[Any]] = None
    message: str = ""
    data: Any = None

    @classmethod
    def from_dict(cls, data: Any) -> "UserprofileResponse":
        body = _mapping(data)
        errors = body.get("errors")
        if errors is not None and not isinstance(errors, list):
            raise ValueError("field 'errors' must be a list")
        return cls(errors=errors, message=_string(body, "message"), data=body.get("data"))

    def to_dict(self) -> dict[str, Any]:
        return {"errors": self.errors, "message": self.message, "data": self.data}