"""
MarkNote — Configuration and Schema Tests
==========================================

What:  Settings validation and the allow-listed form input.
"""

import pytest
from pydantic import ValidationError as PydanticValidationError

from marknote.config import DEFAULT_SECRET_KEY, Settings
from marknote.exceptions import NotFoundError, ValidationError
from marknote.schemas.note import NoteInput, SearchParams


class TestSettings:

    def test_log_level_normalized(self):
        assert Settings(log_level="debug").log_level == "DEBUG"

    def test_invalid_log_level_rejected(self):
        with pytest.raises(PydanticValidationError):
            Settings(log_level="LOUD")

    def test_list_limit_bounds(self):
        with pytest.raises(PydanticValidationError):
            Settings(notes_list_limit=0)

    def test_default_secret_key_flagged(self):
        with pytest.raises(ValueError, match="SECRET_KEY"):
            Settings(secret_key=DEFAULT_SECRET_KEY).validate_required_for_production()

    def test_custom_secret_key_accepted(self):
        Settings(secret_key="s3cret").validate_required_for_production()


class TestNoteInput:

    def test_from_form_keeps_only_title_and_content(self):
        form = {"title": "T", "content": "C", "id": "123", "created_at": "2020-01-01"}

        payload = NoteInput.from_form(form)

        assert payload.model_dump() == {"title": "T", "content": "C"}

    def test_missing_fields_become_empty(self):
        payload = NoteInput.from_form({})

        assert payload.title == ""
        assert payload.content == ""

    def test_search_term(self):
        assert SearchParams(search="ruby").term == "ruby"
        assert SearchParams(search="  ").term is None
        assert SearchParams().term is None


class TestExceptions:

    def test_single_error_summary(self):
        error = ValidationError(errors={"title": ["Title can't be blank"]})

        assert error.message == "1 error prohibited this note from being saved"
        assert error.full_messages == ["Title can't be blank"]

    def test_not_found_context(self):
        error = NotFoundError(resource="note", resource_id="abc")

        assert error.context == {"resource": "note", "resource_id": "abc"}
        assert "abc" in error.message
