"""Messages and log records handled by the topic listener."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping, Optional


def _mapping(data: Any) -> Mapping[str, Any]:
    if not isinstance(data, Mapping):
        raise ValueError("message must be a JSON object")
    return data


def _lookup(data: Mapping[str, Any], key: str) -> Any:
    """Exact key first, then a case-insensitive match."""
    if key in data:
        return data[key]
    folded = key.casefold()
    for name, value in data.items():
        if isinstance(name, str) and name.casefold() == folded:
            return value
    return None


def _string(data: Mapping[str, Any], key: str) -> str:
    value = _lookup(data, key)
    if value is None:
        return ""
    if not isinstance(value, str):
        raise ValueError(f"field '{key}' must be a string")
    return value


def _integer(data: Mapping[str, Any], key: str) -> int:
    value = _lookup(data, key)
    if value is None:
        return 0
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"field '{key}' must be an integer")
    return value


def _integer_list(data: Mapping[str, Any], key: str) -> list[int]:
    value = _lookup(data, key)
    if value is None:
        return []
    if not isinstance(value, list) or any(isinstance(v, bool) or not isinstance(v, int) for v in value):
        raise ValueError(f"field '{key}' must be a list of integers")
    return list(value)


def _payload(data: Mapping[str, Any], key: str) -> "PayloadData":
    value = _lookup(data, key)
    if value is None:
        return PayloadData()
    return PayloadData.from_dict(value)


@dataclass
class MessageResponse:
    """A received topic message: its raw body and its custom properties."""

    data: bytes = b""
    custom: dict[str, Any] = field(default_factory=dict)


@dataclass
class PayloadData:
    message: str = ""
    email: str = ""

    @classmethod
    def from_dict(cls, data: Any) -> "PayloadData":
        body = _mapping(data)
        return cls(message=_string(body, "message"), email=_string(body, "email"))

    def to_dict(self) -> dict[str, Any]:
        return {"message": self.message, "email": self.email}


@dataclass
class RequestData:
    tx_id: str = ""
    source: str = ""
    event_type: str = ""
    payload: PayloadData = field(default_factory=PayloadData)

    @classmethod
    def from_dict(cls, data: Any) -> "RequestData":
        body = _mapping(data)
        return cls(
            tx_id=_string(body, "txID"),
            source=_string(body, "source"),
            event_type=_string(body, "eventType"),
            payload=_payload(body, "payload"),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "txID": self.tx_id,
            "source": self.source,
            "eventType": self.event_type,
            "payload": self.payload.to_dict(),
        }


@dataclass
class ResponseData:
    tx_id: str = ""
    source: str = ""
    event_type: str = ""
    payload: PayloadData = field(default_factory=PayloadData)

    @classmethod
    def from_dict(cls, data: Any) -> "ResponseData":
        body = _mapping(data)
        return cls(
            tx_id=_string(body, "txID"),
            source=_string(body, "source"),
            event_type=_string(body, "eventType"),
            payload=_payload(body, "Payload"),
        )


@dataclass
class RequestEventCreate:
    event_type: str = ""
    event_name: str = ""
    price: int = 0
    max_participant: int = 0

    @classmethod
    def from_dict(cls, data: Any) -> "RequestEventCreate":
        body = _mapping(data)
        return cls(
            event_type=_string(body, "eventType"),
            event_name=_string(body, "eventName"),
            price=_integer(body, "price"),
            max_participant=_integer(body, "maxParticipant"),
        )


@dataclass
class RequestEventUpdated:
    event_type: str = ""
    id: int = 0
    event_name: str = ""
    price: int = 0

    @classmethod
    def from_dict(cls, data: Any) -> "RequestEventUpdated":
        body = _mapping(data)
        return cls(
            event_type=_string(body, "eventType"),
            id=_integer(body, "id"),
            event_name=_string(body, "eventName"),
            price=_integer(body, "price"),
        )


@dataclass
class RequestParticipantEnrolled:
    event_type: str = ""
    id: int = 0
    participant_ids: list[int] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Any) -> "RequestParticipantEnrolled":
        body = _mapping(data)
        return cls(
            event_type=_string(body, "eventType"),
            id=_integer(body, "id"),
            participant_ids=_integer_list(body, "participantIds"),
        )


@dataclass
class ErrorProps:
    """An error together with the place where it was recorded."""

    error: Optional[BaseException] = None
    file_error: str = ""
    line_error: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": None if self.error is None else str(self.error),
            "file_error": self.file_error,
            "line_error": self.line_error,
        }


@dataclass
class AppLogRecord:
    tx_id: str = ""
    event: str = ""
    event_type: str = ""
    source: str = ""
    message_data: Optional[MessageResponse] = None


@dataclass
class LogFormat:
    event: str = ""
    event_type: str = ""
    source: str = ""
    message: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {
            "Event": self.event,
            "EventType": self.event_type,
            "Source": self.source,
            "payload": self.message,
        }


@dataclass
class LogError:
    message_error: str = ""
    file_error: str = ""
    line_error: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "messageError": self.message_error,
            "fileError": self.file_error,
            "lineError": self.line_error,
        }