"""Tests for the Schema wrapper, error translation and record ids."""

from __future__ import annotations

import pytest

from osmnotes.errors import (
    ConflictError,
    InvalidTransitionError,
    Issue,
    OsmNotesError,
    RecordNotFoundError,
    StorageError,
    ValidationError,
)
from osmnotes.models.enums import NoteStatus
from osmnotes.schemas.ids import (
    DATA_TABLE,
    NOTE_TABLE,
    new_record_id,
    record_id,
    record_table,
)
from osmnotes.schemas.parsing import ParseFailure, ParseSuccess
from osmnotes.schemas.values import LocationSchema


class TestSchema:
    def test_name_and_repr(self) -> None:
        assert LocationSchema.name == "Location"
        assert repr(LocationSchema) == "<Schema Location>"

    def test_safe_parse_never_raises(self) -> None:
        for raw in (None, 1, "x", [], {"lat": "a"}, object()):
            result = LocationSchema.safe_parse(raw)
            assert isinstance(result, ParseFailure)

    def test_success_carries_value(self) -> None:
        result = LocationSchema.safe_parse({"lat": 1.5, "lng": 2.5})
        assert isinstance(result, ParseSuccess)
        assert result.success is True
        assert result.value.lng == 2.5

    def test_parse_raises_library_error(self) -> None:
        with pytest.raises(ValidationError) as exc_info:
            LocationSchema.parse({"lat": 100, "lng": 0})
        assert isinstance(exc_info.value, ValueError)
        assert isinstance(exc_info.value, OsmNotesError)

    def test_error_omits_input_values(self) -> None:
        result = LocationSchema.safe_parse({"lat": 123.456789, "lng": 0})
        assert isinstance(result, ParseFailure)
        assert "123.456789" not in str(result.error)


class TestErrors:
    def test_issue_str(self) -> None:
        issue = Issue(path="title", constraint="string_too_short", message="too short")
        assert str(issue) == "title: too short [string_too_short]"

    def test_root_issue_str(self) -> None:
        assert str(Issue(path="", constraint="model_type", message="bad")).startswith("<root>")

    def test_validation_error_without_issues(self) -> None:
        err = ValidationError("Location", [])
        assert err.path == ""
        assert err.constraint == ""
        assert "invalid input" in str(err)

    def test_invalid_transition_message(self) -> None:
        err = InvalidTransitionError(NoteStatus.COMMITTED, NoteStatus.DRAFT)
        assert str(err) == "Invalid transition: committed --> draft"
        assert err.current is NoteStatus.COMMITTED
        assert err.requested is NoteStatus.DRAFT

    def test_invalid_transition_with_raw_strings(self) -> None:
        assert str(InvalidTransitionError("draft", "bogus")) == "Invalid transition: draft --> bogus"

    def test_storage_hierarchy(self) -> None:
        assert issubclass(ConflictError, StorageError)
        err = RecordNotFoundError("note:1")
        assert isinstance(err, StorageError)
        assert err.record_id == "note:1"
        assert str(err) == "Record not found: note:1"


class TestRecordIds:
    def test_record_id(self) -> None:
        assert record_id(NOTE_TABLE, "abc") == "note:abc"

    def test_new_record_id_unique(self) -> None:
        ids = {new_record_id(DATA_TABLE) for _ in range(50)}
        assert len(ids) == 50
        assert all(rid.startswith("data:") for rid in ids)

    def test_record_table(self) -> None:
        assert record_table("user:4242") == "user"

    @pytest.mark.parametrize("table, key", [("", "a"), ("no:te", "a"), ("note", "")])
    def test_bad_parts(self, table: str, key: str) -> None:
        with pytest.raises(ValueError):
            record_id(table, key)

    @pytest.mark.parametrize("rid", ["note", ":abc", "note:", ""])
    def test_not_a_record_id(self, rid: str) -> None:
        with pytest.raises(ValueError, match="Not a record id"):
            record_table(rid)
