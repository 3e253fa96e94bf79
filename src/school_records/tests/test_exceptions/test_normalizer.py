import logging

import pytest
from fastapi import HTTPException
from starlette.exceptions import HTTPException as StarletteHTTPException

from school_records.core.tracing.context import trace_scope
from school_records.exceptions import (
    ConflictError,
    DomainHttpError,
    FailureKind,
    FieldViolation,
    NotFoundError,
    PersistenceError,
    ValidationFailedError,
)
from school_records.exceptions.normalizer import ErrorNormalizer, group_violations

NORMALIZER_LOGGER = "school_records.exceptions.normalizer"


@pytest.fixture
def normalizer() -> ErrorNormalizer:
    return ErrorNormalizer(hardened=True)


def normalizer_records(caplog):
    return [r for r in caplog.records if r.name == NORMALIZER_LOGGER]


class TestClassification:

    def test_domain_error_keeps_status_and_message(self, normalizer):
        envelope = normalizer.build_envelope(NotFoundError("Student 7 not found"))
        assert envelope.status_code == 404
        assert envelope.message == "Student 7 not found"
        assert envelope.error == "Not Found"
        assert envelope.details is None

    def test_domain_error_list_message_passes_through(self, normalizer):
        envelope = normalizer.build_envelope(ConflictError(["first", "second"]))
        assert envelope.status_code == 409
        assert envelope.message == ["first", "second"]

    def test_domain_error_with_violations_is_validation(self, normalizer):
        exc = DomainHttpError("ignored", status_code=422, violations=[FieldViolation("age", ["age must be >= 6"])])
        classification = normalizer.classify(exc)
        assert classification.kind is FailureKind.VALIDATION
        envelope = normalizer.build_envelope(exc)
        assert envelope.status_code == 400
        assert envelope.message == "Validation failed"
        assert envelope.details.errors[0].field == "age"

    def test_unregistered_status_gets_generic_error_text(self, normalizer):
        envelope = normalizer.build_envelope(DomainHttpError("teapot", status_code=599))
        assert envelope.error == "Error"

    def test_http_exception_with_list_detail_is_validation(self, normalizer):
        exc = StarletteHTTPException(400, detail=["name must not be empty", {"field": "age", "messages": ["too young"]}])
        envelope = normalizer.build_envelope(exc)
        assert envelope.message == "Validation failed"
        assert [(e.field, e.messages) for e in envelope.details.errors] == [
            ("body", ["name must not be empty"]),
            ("age", ["too young"]),
        ]

    def test_http_exception_with_dict_detail(self, normalizer):
        envelope = normalizer.build_envelope(HTTPException(403, detail={"message": "Not your course"}))
        assert envelope.status_code == 403
        assert envelope.message == "Not your course"
        assert envelope.error == "Forbidden"

    def test_http_exception_with_dict_detail_carrying_a_message_list(self, normalizer):
        exc = HTTPException(400, detail={"message": ["title must not be empty", "code must be uppercase"]})
        envelope = normalizer.build_envelope(exc)
        assert envelope.status_code == 400
        assert envelope.message == "Validation failed"
        assert [(e.field, e.messages) for e in envelope.details.errors] == [
            ("body", ["title must not be empty", "code must be uppercase"]),
        ]
        assert "[" not in envelope.to_content()["message"]

    def test_http_exception_without_detail_uses_status_text(self, normalizer):
        envelope = normalizer.build_envelope(StarletteHTTPException(404, detail=""))
        assert envelope.message == "Not Found"

    def test_validation_failed_error(self, normalizer):
        exc = ValidationFailedError([FieldViolation("grade", ["grade must be <= 100"]), "body is empty"])
        envelope = normalizer.build_envelope(exc)
        assert envelope.status_code == 400
        assert envelope.error == "Bad Request"
        assert [e.field for e in envelope.details.errors] == ["grade", "body"]

    def test_duplicate_persistence_error_names_fields(self, normalizer):
        exc = PersistenceError("raw", vendor_code="23505", meta={"target": ["email"]})
        envelope = normalizer.build_envelope(exc)
        assert envelope.status_code == 409
        assert envelope.message == "Duplicate value for field(s): email"
        assert envelope.error == "Conflict"

    def test_duplicate_without_target_uses_fallback(self, normalizer):
        envelope = normalizer.build_envelope(PersistenceError("raw", vendor_code="23505"))
        assert envelope.message == "Resource already exists"

    def test_no_data_found(self, normalizer):
        envelope = normalizer.build_envelope(PersistenceError("Student 1 not found", vendor_code="P0002"))
        assert envelope.status_code == 404
        assert envelope.message == "Record not found"

    @pytest.mark.parametrize("vendor_code", ["23502", "23503", "08006", None])
    def test_other_persistence_errors_are_unknown(self, normalizer, vendor_code):
        exc = PersistenceError("Students integrity error: secret detail", vendor_code=vendor_code)
        assert normalizer.classify(exc).kind is FailureKind.UNKNOWN
        envelope = normalizer.build_envelope(exc)
        assert envelope.status_code == 500
        assert envelope.message == "Internal server error"


class TestHardenedMode:

    def test_hardened_hides_own_message(self):
        envelope = ErrorNormalizer(hardened=True).build_envelope(RuntimeError("password=hunter2"))
        assert envelope.message == "Internal server error"
        assert envelope.error == "Internal Server Error"

    def test_non_hardened_shows_own_message(self):
        envelope = ErrorNormalizer(hardened=False).build_envelope(RuntimeError("disk full"))
        assert envelope.message == "disk full"

    def test_non_hardened_persistence_message_has_no_vendor_code(self):
        exc = PersistenceError("Failed to operate on Student", vendor_code="08006")
        envelope = ErrorNormalizer(hardened=False).build_envelope(exc)
        assert envelope.message == "Failed to operate on Student"

    def test_non_hardened_empty_message_falls_back(self):
        envelope = ErrorNormalizer(hardened=False).build_envelope(RuntimeError())
        assert envelope.message == "Internal server error"


class TestNormalize:

    def test_envelope_carries_current_trace_id(self, normalizer):
        with trace_scope("t-42"):
            envelope = normalizer.normalize(NotFoundError("x"))
        assert envelope.trace_id == "t-42"
        assert envelope.to_content()["traceId"] == "t-42"

    def test_trace_id_omitted_outside_scope(self, normalizer):
        content = normalizer.normalize(NotFoundError("x")).to_content()
        assert "traceId" not in content
        assert "details" not in content

    def test_same_failure_twice_gives_identical_envelopes(self, normalizer):
        exc = PersistenceError("raw", vendor_code="23505", meta={"target": ["code"]})
        assert normalizer.build_envelope(exc, "t") == normalizer.build_envelope(exc, "t")

    def test_client_error_logged_once_at_warning(self, normalizer, caplog):
        with caplog.at_level(logging.DEBUG, logger=NORMALIZER_LOGGER):
            with trace_scope("t-1"):
                normalizer.normalize(NotFoundError("Student 7 not found"))
        records = normalizer_records(caplog)
        assert len(records) == 1
        assert records[0].levelno == logging.WARNING
        assert records[0].getMessage() == "[traceId=t-1] 404 Not Found: Student 7 not found"
        assert records[0].exc_info is None

    def test_unknown_error_logged_once_with_stack(self, normalizer, caplog):
        try:
            raise ConnectionError("connection to server lost")
        except ConnectionError as exc:
            failure = exc
        with caplog.at_level(logging.DEBUG, logger=NORMALIZER_LOGGER):
            with trace_scope("t-2"):
                envelope = normalizer.normalize(failure)
        assert envelope.message == "Internal server error"
        records = normalizer_records(caplog)
        assert len(records) == 1
        assert records[0].levelno == logging.ERROR
        assert "[traceId=t-2]" in records[0].getMessage()
        assert "connection to server lost" in records[0].getMessage()
        assert records[0].exc_info[1] is failure

    def test_rendering_failure_falls_back_to_minimal_envelope(self, normalizer, caplog, monkeypatch):
        def broken_classify(exc):
            raise ValueError("classifier bug")

        monkeypatch.setattr(normalizer, "classify", broken_classify)
        with caplog.at_level(logging.DEBUG, logger=NORMALIZER_LOGGER):
            with trace_scope("t-3"):
                envelope = normalizer.normalize(NotFoundError("x"))

        assert envelope.status_code == 500
        assert envelope.message == "Internal server error"
        assert envelope.trace_id == "t-3"
        records = normalizer_records(caplog)
        assert len(records) == 1
        assert "error rendering failed: classifier bug" in records[0].getMessage()

    def test_render_passes_http_exception_headers(self, normalizer):
        response = normalizer.render(StarletteHTTPException(405, headers={"Allow": "GET"}))
        assert response.status_code == 405
        assert response.headers["allow"] == "GET"


def test_group_violations_merges_fields_in_first_seen_order():
    errors = group_violations([
        FieldViolation("name", ["name is required"]),
        FieldViolation("age", ["age must be >= 6"]),
        FieldViolation("name", ["name must be a string"]),
    ])
    assert [(e.field, e.messages) for e in errors] == [
        ("name", ["name is required", "name must be a string"]),
        ("age", ["age must be >= 6"]),
    ]


def test_group_violations_never_empty():
    errors = group_violations([])
    assert len(errors) == 1
    assert errors[0].field == "body"
