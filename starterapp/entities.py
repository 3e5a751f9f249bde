"""Database tables for customers, events and participants."""

from __future__ import annotations

import json
from datetime import datetime
from typing import Any, Optional

from sqlalchemy import Boolean, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship
from sqlalchemy.types import TypeDecorator


def _iso(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value is not None else None


class IntList(TypeDecorator):
    """A list of integers stored as JSON text."""

    impl = Text
    cache_ok = True

    def process_bind_param(self, value: Any, dialect: Any) -> Optional[str]:
        if value is None:
            return None
        return json.dumps(list(value))

    def process_result_value(self, value: Any, dialect: Any) -> Optional[list[int]]:
        if value is None:
            return None
        if isinstance(value, (bytes, bytearray)):
            value = value.decode("utf-8")
        if not isinstance(value, str):
            raise ValueError(f"failed to unmarshal JSONB value: {value!r}")
        try:
            parsed = json.loads(value)
        except json.JSONDecodeError as exc:
            raise ValueError(f"failed to unmarshal JSONB value: {value!r}") from exc
        if parsed is None:
            return None
        if not isinstance(parsed, list) or any(
            isinstance(v, bool) or not isinstance(v, int) for v in parsed
        ):
            raise ValueError(f"failed to unmarshal JSONB value: {value!r}")
        return parsed


class Base(DeclarativeBase):
    """Declarative base for all tables."""


class Customer(Base):
    __tablename__ = "CUSTOMER"

    id: Mapped[int] = mapped_column("ID", Integer, primary_key=True, autoincrement=True)
    first_name: Mapped[str] = mapped_column("FIRST_NAME", String, default="")
    last_name: Mapped[str] = mapped_column("LAST_NAME", String, default="")
    email: Mapped[Optional[str]] = mapped_column("EMAIL", String, nullable=True)
    phone: Mapped[Optional[str]] = mapped_column("PHONE", String, nullable=True)
    created_date: Mapped[Optional[datetime]] = mapped_column("CREATED_DATE", DateTime, nullable=True)
    created_by: Mapped[Optional[str]] = mapped_column("CREATED_BY", String, nullable=True)
    updated_date: Mapped[Optional[datetime]] = mapped_column("UPDATED_DATE", DateTime, nullable=True)
    updated_by: Mapped[Optional[str]] = mapped_column("UPDATED_BY", String, nullable=True)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "firstName": self.first_name,
            "lastName": self.last_name,
            "email": self.email,
            "phone": self.phone,
            "createdDate": _iso(self.created_date),
            "createdBy": self.created_by,
            "updatedDate": _iso(self.updated_date),
            "updatedBy": self.updated_by,
        }


class Event(Base):
    __tablename__ = "Events-QCA"

    id: Mapped[int] = mapped_column("ID", Integer, primary_key=True, autoincrement=True)
    event_name: Mapped[str] = mapped_column("event_name", String, default="")
    price: Mapped[int] = mapped_column("price", Integer, default=0)
    participant_ids: Mapped[Optional[list[int]]] = mapped_column("participant_ids", IntList, nullable=True)
    max_participant: Mapped[int] = mapped_column("max_participant", Integer, default=0)
    total_participant: Mapped[int] = mapped_column("total_participant", Integer, default=0)
    is_full_registered: Mapped[bool] = mapped_column("is_full_registered", Boolean, default=False)
    is_full_paid: Mapped[bool] = mapped_column("is_full_paid", Boolean, default=False)
    created_date: Mapped[Optional[datetime]] = mapped_column("created_date", DateTime, nullable=True)
    created_by: Mapped[Optional[str]] = mapped_column("created_by", String, nullable=True)
    updated_date: Mapped[Optional[datetime]] = mapped_column("updated_date", DateTime, nullable=True)
    updated_by: Mapped[Optional[str]] = mapped_column("updated_by", String, nullable=True)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "eventName": self.event_name,
            "price": self.price,
            "participantIds": self.participant_ids,
            "maxParticipant": self.max_participant,
            "totalParticipant": self.total_participant,
            "isFullRegistered": self.is_full_registered,
            "isFullPaid": self.is_full_paid,
            "createdDate": _iso(self.created_date),
            "createdBy": self.created_by,
            "updatedDate": _iso(self.updated_date),
            "updatedBy": self.updated_by,
        }


class Participant(Base):
    __tablename__ = "Participant-QCA"

    id: Mapped[int] = mapped_column("id", Integer, primary_key=True)
    events_id: Mapped[Optional[int]] = mapped_column(
        "events_id", ForeignKey("Events-QCA.ID"), nullable=True
    )
    events: Mapped[Optional[Event]] = relationship(Event)
    name: Mapped[str] = mapped_column("name", String, default="")
    paid: Mapped[bool] = mapped_column("paid", Boolean, default=False)

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {"id": self.id}
        if self.events is not None:
            result["events"] = self.events.to_dict()
        result["name"] = self.name
        result["paid"] = self.paid
        return result