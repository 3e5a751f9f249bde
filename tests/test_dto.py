import json
import logging
from dataclasses import dataclass, field

import pytest

from starterapp.dto import (
    ErrorDTO,
    FieldError,
    HttpError,
    RequestWithDataDTO,
    ResponseDTO,
    ResponseOffsetDTO,
    Validator,
    iif,
    log_error,
    struct_to_dict,
)


@dataclass
class Sample:
    name: str = field(default="", metadata={"validate": "required"})
    count: int = field(default=0, metadata={"validate": "required"})
    note: str = ""


@dataclass
class BadRule:
    name: str = field(default="x", metadata={"validate": "fancy"})


def test_error_dto_from_error():
    dto = ErrorDTO.from_error(400, "", ValueError("boom"))
    assert dto.to_dict() == {"code": 400, "message": "", "errors": {"code": "boom"}}


def test_error_dto_from_http_error():
    dto = ErrorDTO.from_http_error(HttpError(404, "Not Found"))
    assert dto.code == 404
    assert dto.message == "Not Found"
    assert dto.errors == {"404": "Not Found"}


def test_response_dto_to_dict():
    assert ResponseDTO(data=[1, 2], message="ok").to_dict() == {"data": [1, 2], "message": "ok"}


def test_response_offset_dto_keeps_all_fields():
    dto = ResponseOffsetDTO(data=["a"], message="ok", total=30, limit=10, offset=20)
    result = dto.to_dict()
    assert result == {"data": ["a"], "limit": 10, "offset": 20, "total": 30, "message": "ok"}


def test_response_dto_converts_nested_objects():
    inner = ErrorDTO.from_error(500, "m", RuntimeError("bad"))
    assert ResponseDTO(data=[inner], message="x").to_dict()["data"] == [inner.to_dict()]


def test_validator_passes_filled_object():
    assert Validator().validate(Sample(name="n", count=1)) == []


def test_validator_reports_each_missing_field():
    failures = Validator().validate(Sample())
    assert [f.failed_field for f in failures] == ["Sample.name", "Sample.count"]
    assert all(f.tag == "required" for f in failures)
    assert "Sample.name" in failures[0].message


def test_field_error_to_dict_keys():
    failure = Validator().validate(Sample(count=3))[0]
    assert isinstance(failure, FieldError)
    assert failure.to_dict()["FailedField"] == "Sample.name"
    assert set(failure.to_dict()) == {"FailedField", "Tag", "Value", "Message"}


def test_validator_rejects_unknown_rule():
    with pytest.raises(ValueError):
        Validator().validate(BadRule())


def test_validator_rejects_non_dataclass():
    with pytest.raises(TypeError):
        Validator().validate({"name": "x"})


def test_iif_picks_branch():
    assert iif(True, "x", "y") == "x"
    assert iif(False, "x", "y") == "y"


def test_struct_to_dict_is_shallow():
    nested = RequestWithDataDTO(tx_id="t1", user="u", roles=["r"], data=Sample(name="n"))
    result = struct_to_dict(nested)
    assert result["tx_id"] == "t1"
    assert result["data"] is nested.data


def test_struct_to_dict_non_struct_is_none():
    assert struct_to_dict({"a": 1}) is None
    assert struct_to_dict(Sample) is None


def test_log_error_records_location(caplog):
    logger = logging.getLogger("starterapp.test")
    error = RuntimeError("db down")
    with caplog.at_level(logging.ERROR, logger="starterapp.test"):
        returned = log_error(logger, {"id": 7}, error)
    assert returned is error
    payload = json.loads(caplog.records[-1].getMessage())
    assert payload["Error"] == "db down"
    assert payload["Param"] == {"id": 7}
    assert payload["File"].endswith("test_dto.py")
    assert payload["Line"] > 0


def test_log_error_without_error_returns_none(caplog):
    logger = logging.getLogger("starterapp.test")
    with caplog.at_level(logging.ERROR, logger="starterapp.test"):
        assert log_error(logger, {}, None) is None
    assert caplog.records == []