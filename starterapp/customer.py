"""Listing and creating customers over HTTP."""

from __future__ import annotations

import json
import logging
from typing import Any, Callable, TypeVar

from flask import Blueprint, request
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from .dto import ErrorDTO, Validator
from .entities import Customer
from .models import ApiResponse, CustomerInsertRequest

SessionFactory = Callable[[], Session]
HandlerResult = tuple[Any, int]
R = TypeVar("R")


class CustomerRepository:
    """Persistence of customers."""

    def __init__(self, session_factory: SessionFactory) -> None:
        self.session_factory = session_factory

    def get_customer_all(self) -> list[Customer]:
        with self.session_factory() as session:
            customers = list(session.scalars(select(Customer)))
            session.expunge_all()
        return customers

    def insert_customer(self, req: CustomerInsertRequest) -> Customer:
        customer = Customer(
            first_name=req.first_name,
            last_name=req.last_name,
            email=req.email,
            phone=req.phone,
        )
        with self.session_factory() as session:
            session.add(customer)
            session.commit()
            session.refresh(customer)
            session.expunge(customer)
        return customer


class CustomerService:
    """Business layer over the customer repository."""

    def __init__(self, repository: CustomerRepository) -> None:
        self.repository = repository

    def get_customer_all(self) -> list[Customer]:
        return self.repository.get_customer_all()

    def insert_customer(self, req: CustomerInsertRequest) -> Customer:
        return self.repository.insert_customer(req)


class CustomerHandler:
    """Turns HTTP requests into service calls and service results into responses."""

    def __init__(self, service: CustomerService, validator: Validator, logger: logging.Logger) -> None:
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

    def get_customer_all(self) -> HandlerResult:
        try:
            data = self.service.get_customer_all()
        except SQLAlchemyError as exc:
            return self._bad_request(exc)

        res = ApiResponse(data=data, message="success", errors=None)
        self.logger.info("GetCustomerAll: %s", res)
        return res.to_dict(), 200

    def insert_customer(self) -> HandlerResult:
        try:
            req = self._parse(CustomerInsertRequest.from_dict)
        except ValueError as exc:
            return self._bad_request(exc)

        failures = self.validator.validate(req)
        if failures:
            encoded = json.dumps([failure.to_dict() for failure in failures])
            self.logger.error("validate len 0")
            return ErrorDTO.from_error(400, "", ValueError(encoded)).to_dict(), 400

        try:
            data = self.service.insert_customer(req)
        except SQLAlchemyError as exc:
            return self._bad_request(exc)

        res = ApiResponse(data=data, message="success", errors=None)
        self.logger.info("InsertCustomer: %s", res)
        return res.to_dict(), 200


def create_customer_blueprint(session_factory: SessionFactory, logger: logging.Logger) -> Blueprint:
    """Blueprint serving ``GET`` and ``POST`` on ``/customer``."""
    handler = CustomerHandler(CustomerService(CustomerRepository(session_factory)), Validator(), logger)
    blueprint = Blueprint("customer", __name__, url_prefix="/customer")

    @blueprint.get("", strict_slashes=False)
    def get_customer_all():
        return handler.get_customer_all()

    @blueprint.post("", strict_slashes=False)
    def insert_customer():
        return handler.insert_customer()

    return blueprint