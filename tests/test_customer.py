import json
import logging

import pytest
from flask import Flask
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from starterapp.customer import (
    CustomerRepository,
    CustomerService,
    create_customer_blueprint,
)
from starterapp.entities import Base
from starterapp.models import CustomerInsertRequest


def _engine():
    return create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )


@pytest.fixture
def session_factory():
    engine = _engine()
    Base.metadata.create_all(engine)
    yield sessionmaker(bind=engine)
    engine.dispose()


def _client(session_factory):
    app = Flask(__name__)
    app.register_blueprint(create_customer_blueprint(session_factory, logging.getLogger("test")))
    return app.test_client()


@pytest.fixture
def client(session_factory):
    return _client(session_factory)


def test_insert_then_list(client):
    res = client.post(
        "/customer",
        json={"firstName": "Ann", "lastName": "Lee", "email": "ann@example.com"},
    )
    assert res.status_code == 200
    body = res.get_json()
    assert body["message"] == "success"
    assert body["errors"] is None
    assert body["data"]["firstName"] == "Ann"
    assert body["data"]["email"] == "ann@example.com"
    assert body["data"]["phone"] is None
    created_id = body["data"]["id"]
    assert created_id >= 1

    listed = client.get("/customer")
    assert listed.status_code == 200
    data = listed.get_json()["data"]
    assert [item["id"] for item in data] == [created_id]
    assert data[0]["lastName"] == "Lee"


def test_list_empty(client):
    res = client.get("/customer")
    assert res.status_code == 200
    assert res.get_json()["data"] == []


def test_missing_first_name_is_rejected(client):
    res = client.post("/customer", json={"lastName": "Lee"})
    assert res.status_code == 400
    body = res.get_json()
    assert body["code"] == 400
    failures = json.loads(body["errors"]["code"])
    assert [f["FailedField"] for f in failures] == ["CustomerInsertRequest.first_name"]
    assert failures[0]["Tag"] == "required"


def test_missing_both_names_reports_two_failures(client):
    res = client.post("/customer", json={})
    assert res.status_code == 400
    failures = json.loads(res.get_json()["errors"]["code"])
    assert len(failures) == 2
    assert {f["Tag"] for f in failures} == {"required"}
    assert client.get("/customer").get_json()["data"] == []


def test_body_that_is_not_json_is_rejected(client):
    res = client.post("/customer", data="not json", content_type="text/plain")
    assert res.status_code == 400
    assert res.get_json()["errors"]["code"] == "Unprocessable Entity"


def test_wrong_field_type_is_rejected(client):
    res = client.post("/customer", json={"firstName": 5, "lastName": "Lee"})
    assert res.status_code == 400
    assert "firstName" in res.get_json()["errors"]["code"]


def test_repository_keeps_insert_order(session_factory):
    repo = CustomerRepository(session_factory)
    first = repo.insert_customer(CustomerInsertRequest(first_name="A", last_name="B"))
    second = repo.insert_customer(CustomerInsertRequest(first_name="C", last_name="D", phone="x"))
    assert first.id != second.id
    listed = repo.get_customer_all()
    assert [c.id for c in listed] == [first.id, second.id]
    assert listed[1].phone == "x"


def test_service_delegates_to_repository(session_factory):
    service = CustomerService(CustomerRepository(session_factory))
    created = service.insert_customer(CustomerInsertRequest(first_name="A", last_name="B"))
    assert [c.to_dict() for c in service.get_customer_all()] == [created.to_dict()]


def test_database_error_gives_bad_request():
    engine = _engine()
    try:
        client = _client(sessionmaker(bind=engine))
        res = client.get("/customer")
        assert res.status_code == 400
        assert "CUSTOMER" in res.get_json()["errors"]["code"]
    finally:
        engine.dispose()