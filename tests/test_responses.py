"""Tests for the error/response normalizer."""

import re

import pytest

from portfolio_api.core.errors import (
    AppError,
    ErrorCode,
    ExternalAPIAppError,
    STATUS_CODE_BY_ERROR,
    get_status_code_for_error,
)
from portfolio_api.core.responses import (
    CLASSIFICATION_RULES,
    create_error_response,
    create_success_response,
    format_epoch_ms,
    handle_error,
    validate_email,
    validate_required_fields,
)

ISO_MILLIS_UTC = re.compile(r"^\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}\.\d{3}Z$")


class TestStatusCodes:
    @pytest.mark.parametrize(
        "code, expected",
        [
            (ErrorCode.VALIDATION_ERROR, 400),
            (ErrorCode.UNAUTHORIZED, 401),
            (ErrorCode.FORBIDDEN, 403),
            (ErrorCode.NOT_FOUND, 404),
            (ErrorCode.RATE_LIMITED, 429),
            (ErrorCode.BAD_REQUEST, 400),
            (ErrorCode.SERVER_ERROR, 500),
            (ErrorCode.SERVICE_UNAVAILABLE, 503),
            (ErrorCode.TIMEOUT, 504),
            (ErrorCode.DATABASE_ERROR, 500),
            (ErrorCode.EXTERNAL_API_ERROR, 502),
        ],
    )
    def test_mapping(self, code: ErrorCode, expected: int):
        assert get_status_code_for_error(code) == expected
        assert get_status_code_for_error(code) == expected

    def test_every_code_is_mapped(self):
        assert set(STATUS_CODE_BY_ERROR) == set(ErrorCode)

    def test_accepts_string_values(self):
        assert get_status_code_for_error("NOT_FOUND") == 404

    def test_unknown_code_defaults_to_500(self):
        assert get_status_code_for_error("SOMETHING_ELSE") == 500


class TestCreateResponses:
    def test_epoch_ms_uses_timestamp_format(self):
        assert format_epoch_ms(1_700_000_000_123) == "2023-11-14T22:13:20.123Z"
        assert ISO_MILLIS_UTC.match(format_epoch_ms(0))

    def test_error_response_shape(self):

        error = create_error_response(ErrorCode.VALIDATION_ERROR, "Test error")

        assert error.success is False
        assert error.error == ErrorCode.VALIDATION_ERROR
        assert error.code == "VALIDATION_ERROR"
        assert error.message == "Test error"
        assert error.status_code == 400
        assert ISO_MILLIS_UTC.match(error.timestamp)
        assert not hasattr(error, "data")

    def test_error_wire_format(self):
        error = create_error_response(
            ErrorCode.VALIDATION_ERROR,
            "All fields are required",
            {"missingFields": ["email"]},
        )

        wire = error.to_wire()

        assert wire == {
            "success": False,
            "error": "VALIDATION_ERROR",
            "message": "All fields are required",
            "code": "VALIDATION_ERROR",
            "timestamp": error.timestamp,
            "statusCode": 400,
            "details": {"missingFields": ["email"]},
        }

    def test_error_wire_format_omits_absent_details(self):
        wire = create_error_response(ErrorCode.NOT_FOUND, "Missing").to_wire()

        assert "details" not in wire
        assert "data" not in wire

    def test_details_are_copied_through(self):
        details = {"field": "email", "nested": {"a": [1, 2]}}
        error = create_error_response(ErrorCode.BAD_REQUEST, "Bad", details)

        assert error.details == details

    def test_success_response_shape(self):
        response = create_success_response({"data": "test"})

        assert response.success is True
        assert response.data == {"data": "test"}
        assert ISO_MILLIS_UTC.match(response.timestamp)
        assert not hasattr(response, "error")
        assert not hasattr(response, "status_code")

    def test_success_response_drops_message(self):
        # The message argument is accepted but is not part of the wire shape.
        wire = create_success_response([1, 2], "Loaded").to_wire()

        assert wire == {"success": True, "data": [1, 2], "timestamp": wire["timestamp"]}
        assert "message" not in wire


class TestHandleError:
    def test_validation_message(self):
        error = handle_error(Exception("Validation failed: invalid input"))

        assert error.error == ErrorCode.VALIDATION_ERROR
        assert error.status_code == 400
        assert error.message == "Validation failed: invalid input"

    def test_timeout_message_is_normalized(self):
        error = handle_error(Exception("Request timeout occurred"))

        assert error.error == ErrorCode.TIMEOUT
        assert error.status_code == 504
        assert error.message == "Request timeout"

    def test_etimedout(self):
        assert handle_error(OSError("connect ETIMEDOUT 1.2.3.4:443")).error == ErrorCode.TIMEOUT

    def test_not_found(self):
        error = handle_error(RuntimeError("Resource not found"))

        assert error.error == ErrorCode.NOT_FOUND
        assert error.status_code == 404

    def test_unauthorized(self):
        assert handle_error(RuntimeError("GitHub 401")).error == ErrorCode.UNAUTHORIZED

    def test_rate_limit_message_is_normalized(self):
        error = handle_error(RuntimeError("upstream returned 429"))

        assert error.error == ErrorCode.RATE_LIMITED
        assert error.message == "Rate limit exceeded"

    def test_matching_is_case_insensitive(self):
        assert handle_error(ValueError("NOT FOUND")).error == ErrorCode.NOT_FOUND

    def test_first_matching_rule_wins(self):
        # Matches both "invalid" and "timeout"; validation is checked first.
        error = handle_error(Exception("invalid timeout value"))

        assert error.error == ErrorCode.VALIDATION_ERROR

    def test_unmatched_exception_keeps_message(self):
        error = handle_error(RuntimeError("disk on fire"))

        assert error.error == ErrorCode.SERVER_ERROR
        assert error.status_code == 500
        assert error.message == "disk on fire"
        assert error.details == {"originalError": "disk on fire"}

    def test_non_exception_value(self):
        error = handle_error("something odd")

        assert error.error == ErrorCode.SERVER_ERROR
        assert error.status_code == 500
        assert error.message == "An unexpected error occurred"
        assert error.details == {"originalError": "something odd"}

    def test_none_value(self):
        assert handle_error(None).details == {"originalError": "None"}

    def test_object_with_message_attribute(self):
        class Failure:
            message = "record not found"

        assert handle_error(Failure()).error == ErrorCode.NOT_FOUND

    def test_unprintable_exception(self):
        class Unprintable(Exception):
            def __str__(self):
                raise RuntimeError("cannot render")

        error = handle_error(Unprintable())

        assert error.error == ErrorCode.SERVER_ERROR
        assert error.status_code == 500
        assert error.message == "An unexpected error occurred"
        assert error.details == {"originalError": "Unprintable"}

    def test_message_property_that_raises(self):
        class Broken(Exception):
            @property
            def message(self):
                raise RuntimeError("no message")

        error = handle_error(Broken("resource not found"))

        assert error.error == ErrorCode.SERVER_ERROR
        assert error.message == "An unexpected error occurred"
        assert error.details == {"originalError": "resource not found"}

    def test_app_error_keeps_its_classification(self):

        exc = ExternalAPIAppError(ErrorCode.EXTERNAL_API_ERROR, "GitHub 500", {"upstreamStatus": 500})

        error = handle_error(exc)

        assert error.error == ErrorCode.EXTERNAL_API_ERROR
        assert error.status_code == 502
        assert error.message == "GitHub 500"
        assert error.details == {"upstreamStatus": 500}

    def test_app_error_is_not_reclassified_by_message(self):
        error = handle_error(AppError(ErrorCode.FORBIDDEN, "invalid token scope"))

        assert error.error == ErrorCode.FORBIDDEN

    def test_rule_order(self):
        assert [rule.code for rule in CLASSIFICATION_RULES] == [
            ErrorCode.VALIDATION_ERROR,
            ErrorCode.NOT_FOUND,
            ErrorCode.UNAUTHORIZED,
            ErrorCode.TIMEOUT,
            ErrorCode.RATE_LIMITED,
        ]


class TestValidateEmail:
    @pytest.mark.parametrize("value", ["test@example.com", "user.name@domain.co.uk", "a+b@x.io"])
    def test_valid(self, value: str):
        assert validate_email(value) is True

    @pytest.mark.parametrize(
        "value",
        ["invalid", "@example.com", "test@", "a b@example.com", "a@@example.com", "a@example", ""],
    )
    def test_invalid(self, value: str):
        assert validate_email(value) is False


class TestValidateRequiredFields:
    def test_all_present(self):
        data = {"name": "John", "email": "john@example.com", "message": "Hello"}

        result = validate_required_fields(data, ["name", "email", "message"])

        assert result.is_valid is True
        assert result.missing_fields == []

    def test_missing_fields_keep_requested_order(self):
        result = validate_required_fields({"name": "John", "email": ""}, ["name", "email", "message"])

        assert result.is_valid is False
        assert result.missing_fields == ["email", "message"]

    def test_whitespace_only_counts_as_missing(self):
        result = validate_required_fields({"name": "   \t"}, ["name"])

        assert result.missing_fields == ["name"]

    def test_falsy_values_count_as_missing(self):
        result = validate_required_fields({"a": 0, "b": None, "c": [], "d": "x"}, ["a", "b", "c", "d"])

        assert result.missing_fields == ["a", "b", "c"]
