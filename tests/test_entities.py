import json

import pytest
from sqlalchemy import create_engine, inspect, text
from sqlalchemy.orm import Session

from starterapp.entities import Base, Customer, Event, IntList, Participant


@pytest.fixture
def engine():
    eng = create_engine("sqlite://")
    Base.metadata.create_all(eng)
    yield eng
    eng.dispose()


def test_tables_are_created_with_source_names(engine):
    names = set(inspect(engine).get_table_names())
    assert {"CUSTOMER", "Events-QCA", "Participant-QCA"} <= names
    columns = {c["name"] for c in inspect(engine).get_columns("CUSTOMER")}
    assert {"FIRST_NAME", "LAST_NAME", "EMAIL"} <= columns


def test_int_list_bind_round_trip():
    column_type = IntList()
    stored = column_type.process_bind_param([4, 5], None)
    assert json.loads(stored) == [4, 5]
    assert column_type.process_result_value(stored, None) == [4, 5]


def test_int_list_accepts_bytes_and_none():
    column_type = IntList()
    assert column_type.process_result_value(b"[1]", None) == [1]
    assert column_type.process_result_value(None, None) is None
    assert column_type.process_bind_param(None, None) is None


def test_int_list_rejects_bad_values():
    column_type = IntList()
    with pytest.raises(ValueError):
        column_type.process_result_value(5, None)
    with pytest.raises(ValueError):
        column_type.process_result_value('["a"]', None)
    with pytest.raises(ValueError):
        column_type.process_result_value("not json", None)


def test_customer_insert_and_to_dict(engine):
    with Session(engine) as session:
        customer = Customer(first_name="Ann", last_name="Lee", email="ann@example.com")
        session.add(customer)
        session.commit()
        data = customer.to_dict()
    assert data["id"] >= 1
    assert data["firstName"] == "Ann"
    assert data["email"] == "ann@example.com"
    assert data["createdDate"] is None


def test_event_participant_ids_persist(engine):
    with Session(engine) as session:
        event = Event(event_name="Run", price=100, max_participant=20, participant_ids=[1, 2, 3])
        session.add(event)
        session.commit()
        event_id = event.id
    with Session(engine) as session:
        loaded = session.get(Event, event_id)
        assert loaded.participant_ids == [1, 2, 3]
        raw = session.execute(text('SELECT participant_ids FROM "Events-QCA"')).scalar_one()
    assert json.loads(raw) == [1, 2, 3]


def test_event_defaults_after_insert(engine):
    with Session(engine) as session:
        event = Event(event_name="Swim", price=50, max_participant=5)
        session.add(event)
        session.commit()
        data = event.to_dict()
    assert data["totalParticipant"] == 0
    assert data["isFullRegistered"] is False
    assert data["isFullPaid"] is False
    assert data["eventName"] == "Swim"


def test_participant_to_dict_includes_loaded_event(engine):
    with Session(engine) as session:
        event = Event(event_name="Ride", price=10, max_participant=2)
        participant = Participant(id=42, name="Bo", paid=True, events=event)
        session.add(participant)
        session.commit()
        data = participant.to_dict()
        assert participant.events_id == event.id
    assert data["events"]["eventName"] == "Ride"
    assert data["name"] == "Bo"
    assert "events_id" not in data


def test_participant_without_event_omits_events(engine):
    with Session(engine) as session:
        participant = Participant(id=7, name="Cy")
        session.add(participant)
        session.commit()
        data = participant.to_dict()
    assert "events" not in data
    assert data["paid"] is False