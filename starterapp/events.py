"""Creating and updating events over HTTP."""

from __future__ import annotations

import json
import logging
from typing import Any, Callable, TypeVar

from flask import Blueprint, request
from sqlalchemy import select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from .dto import ErrorDTO, Validator
from .entities import Event
from .models import ApiResponse, EventsInsertRequest, EventsUpdateRequest

SessionFactory = Callable[[], Session]
HandlerResult = tuple[Any, int]
R = TypeVar("R")


class EventsRepository:
    """Persistence of events."""

    def __init__(self, session_factory: SessionFactory) -> None:
        self.session_factory = session_factory

    def insert_events(self, req: EventsInsertRequest) -> Event:
        event = Event(
            event_name=req.event_name,
            price=req.price,
            max_participant=req.max_participant,
            total_participant=0,
            is_full_registered=False,
            is_full_paid=False,
        )
        with self.session_factory() as session:
            session.add(event)
            session.commit()
            session.refresh(event)
            session.expunge(event)
        return event

    def update_events(self, req: EventsUpdateRequest, event_id: int) -> Event:
        """Update the non-empty fields of ``req`` on the event with ``event_id``."""
        values: dict[str, Any] = {}
        if req.event_name:
            values["event_name"] = req.event_name
        if req.price:
            values["price"] = req.price
        if values:
            with self.session_factory() as session:
                session.execute(
                    update(Event).where(Event.id == event_id).values(**values),
                    execution_options={"synchronize_session": False},
                )
                session.commit()
        return Event(
            id=event_id,
            event_name=req.event_name,
            price=req.price,
            participant_ids=None,
            max_participant=0,
            total_participant=0,
            is_full_registered=False,
            is_full_paid=False,
        )


class EventsService:
    """Business layer over the events repository."""

    def __init__(self, repository: EventsRepository) -> None:
        self.repository = repository

    def insert_events(self, req: EventsInsertRequest) -> Event:
        return self.repository.insert_events(req)

    def update_events(self, req: EventsUpdateRequest, event_id: int) -> Event:
        return self.repository.update_events(req, event_id)


def _param_int(value: Any) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return 0


class EventsHandler:
    """Turns HTTP requests into service calls and service results into responses."""

    def __init__(self, service: EventsService, validator: Validator, logger: logging.Logger) -> None:
        self.service = service
        self.validator = validator
        self.logger = logger

    def _bad_request(self, error: BaseException) -> HandlerResult:
        self.logger.error("%s", error)
        return ErrorDTO.from_error(400, "", error).to_dict(), 400

    def _parse(self, parser: Callable[[Any], R]) -> R:
        body = request.get_json(silent=True)
        if body is None:
            raise ValueError("Unprocessable Entity")
        return parser(body)

    def _invalid(self, req: Any) -> HandlerResult | None:
        failures = self.validator.validate(req)
        if not failures:
            return None
        encoded = json.dumps([failure.to_dict() for failure in failures])
        self.logger.error("validate len 0")
        return ErrorDTO.from_error(400, "", ValueError(encoded)).to_dict(), 400

    def insert_events(self) -> HandlerResult:
        try:
            req = self._parse(EventsInsertRequest.from_dict)
        except ValueError as exc:
            return self._bad_request(exc)

        invalid = self._invalid(req)
        if invalid is not None:
            return invalid

        try:
            data = self.service.insert_events(req)
        except SQLAlchemyError as exc:
            return self._bad_request(exc)

        res = ApiResponse(data=data, message="success", errors=None)
        self.logger.info("InsertEvents: %s", res)
        return res.to_dict(), 200

    def update_events(self, event_id: Any) -> HandlerResult:
        try:
            req = self._parse(EventsUpdateRequest.from_dict)
        except ValueError as exc:
            return self._bad_request(exc)

        invalid = self._invalid(req)
        if invalid is not None:
            return invalid

        try:
            data = self.service.update_events(req, _param_int(event_id))
        except SQLAlchemyError as exc:
            return self._bad_request(exc)

        res = ApiResponse(data=data, message="success", errors=None)
        self.logger.info("UpdateEvents: %s", res)
        return res.to_dict(), 200

    def enroll_events(self, event_id: Any) -> HandlerResult:
        """Acknowledge an enrolment request with an empty body; nothing is stored."""
        self.logger.info("EnrollEvents: %s", _param_int(event_id))
        return "", 200


def create_events_blueprint(session_factory: SessionFactory, logger: logging.Logger) -> Blueprint:
    """Blueprint serving the ``/events`` routes."""
    handler = EventsHandler(EventsService(EventsRepository(session_factory)), Validator(), logger)
    blueprint = Blueprint("events", __name__, url_prefix="/events")

    @blueprint.post("/", strict_slashes=False)
    def insert_events():
        return handler.insert_events()

    @blueprint.patch("/<event_id>")
    def update_events(event_id: str):
        return handler.update_events(event_id)

    @blueprint.post("/<event_id>/enroll")
    def enroll_events(event_id: str):
        return handler.enroll_events(event_id)

    return blueprint


def _stored_event(session_factory: SessionFactory, event_id: int) -> Event | None:
    with session_factory() as session:
        event = session.scalars(select(Event).where(Event.id == event_id)).first()
        if event is not None:
            session.expunge(event)
        return event