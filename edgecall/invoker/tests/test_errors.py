import httpx
import pytest

from edgecall.invoker.core.errors import (
    ACCEPTED_MESSAGE,
    encode_payload,
    from_functions_error,
    normalize_exception,
    parse_error_body,
    status_from_message,
)
from edgecall.invoker.core.exceptions import (
    FunctionsHttpError,
    FunctionsRelayError,
    HttpStatusError,
    InvocationTimeoutError,
    PayloadSerializationError,
    TransportError,
)
from edgecall.invoker.models.result import ErrorKind


class TestParseErrorBody:
    def test_details_field(self):
        assert parse_error_body(413, '{"details":"Video too large"}') == (
            "Video too large",
            {"details": "Video too large"},
        )

    def test_error_field_without_details(self):
        message, parsed = parse_error_body(500, '{"error":"oops"}')
        assert message == "oops"
        assert parsed == {"error": "oops"}

    def test_details_preferred_over_error_and_message(self):
        message, _ = parse_error_body(
            400, '{"message":"m","error":"e","details":"d"}'
        )
        assert message == "d"

    def test_message_field(self):
        message, _ = parse_error_body(404, '{"message":"Function not found"}')
        assert message == "Function not found"

    def test_plain_text_body(self):
        assert parse_error_body(500, "Internal Server Error") == ("Internal Server Error", None)

    def test_empty_body(self):
        assert parse_error_body(502, "") == ("HTTP 502", None)

    def test_json_without_known_fields(self):
        message, parsed = parse_error_body(500, '{"code":"E42"}')
        assert message == "HTTP 500"
        assert parsed == {"code": "E42"}

    def test_structured_field_value_is_serialized(self):
        message, _ = parse_error_body(422, '{"error":{"field":"videoId"}}')
        assert message == '{"field": "videoId"}'


class TestStatusFromMessage:
    @pytest.mark.parametrize(
        "message,expected",
        [
            ("Edge Function returned a non-2xx status code 500", 500),
            ("Request failed with Status Code 413", 413),
            ("Failed to send a request to the Edge Function", None),
            ("", None),
            (None, None),
        ],
    )
    def test_pattern(self, message, expected):
        assert status_from_message(message) == expected


class TestFromFunctionsError:
    def test_context_status_wins(self):
        error = FunctionsHttpError("status code 500", status=400, context={"status": 413})
        assert from_functions_error(error).http_status == 413

    def test_top_level_status(self):
        error = FunctionsHttpError("Edge Function failed", status=429)
        normalized = from_functions_error(error)
        assert normalized.http_status == 429
        assert normalized.kind == ErrorKind.HTTP_STATUS

    def test_message_status(self):
        error = FunctionsHttpError("Edge Function returned a non-2xx status code 500")
        normalized = from_functions_error(error)
        assert normalized.http_status == 500
        assert normalized.transport == "primary"

    def test_json_body_is_reflected(self):
        error = FunctionsHttpError(
            "Edge Function returned a non-2xx status code 413",
            context={"status": 413, "body": '{"details":"Video too large"}'},
        )
        normalized = from_functions_error(error)
        assert normalized.message == "Video too large"
        assert normalized.raw_details == {"details": "Video too large"}
        assert normalized.http_status == 413

    def test_text_body_kept_as_detail(self):
        error = FunctionsHttpError(
            "Edge Function returned a non-2xx status code 500",
            context={"status": 500, "body": "upstream crashed"},
        )
        normalized = from_functions_error(error)
        assert normalized.message == "Edge Function returned a non-2xx status code 500"
        assert normalized.raw_details == "upstream crashed"

    def test_no_status_is_transport_error(self):
        normalized = from_functions_error(FunctionsRelayError("Relay Error invoking the Edge Function"))
        assert normalized.kind == ErrorKind.TRANSPORT
        assert normalized.http_status is None

    def test_accepted(self):
        normalized = from_functions_error(FunctionsHttpError("accepted", context={"status": 202}))
        assert normalized.kind == ErrorKind.ACCEPTED
        assert normalized.message == ACCEPTED_MESSAGE

    @pytest.mark.parametrize("status", ["Bad Gateway", True, 502.5, {"code": 502}])
    def test_non_numeric_status_is_ignored(self, status):
        normalized = from_functions_error(FunctionsHttpError("gateway said no", context={"status": status}))
        assert normalized.kind == ErrorKind.TRANSPORT
        assert normalized.http_status is None

    def test_non_numeric_context_status_falls_back_to_message(self):
        error = FunctionsHttpError(
            "Edge Function returned a non-2xx status code 502", context={"status": "Bad Gateway"}
        )
        assert from_functions_error(error).http_status == 502

    def test_numeric_string_status(self):
        error = FunctionsHttpError("gateway said no", context={"status": "503"})
        assert from_functions_error(error).http_status == 503


class TestNormalizeException:
    def test_serialization(self):
        normalized = normalize_exception(PayloadSerializationError(TypeError("bad")))
        assert normalized.kind == ErrorKind.SERIALIZATION
        assert normalized.transport == "local"

    def test_timeout_has_no_status(self):
        normalized = normalize_exception(InvocationTimeoutError(30), transport="https")
        assert normalized.kind == ErrorKind.TIMEOUT
        assert normalized.http_status is None
        assert "30s" in normalized.message

    def test_http_status_error(self):
        normalized = normalize_exception(
            HttpStatusError(413, "Video too large", details={"details": "Video too large"}),
            transport="https",
        )
        assert normalized.kind == ErrorKind.HTTP_STATUS
        assert normalized.http_status == 413
        assert normalized.raw_details == {"details": "Video too large"}

    def test_transport_error(self):
        normalized = normalize_exception(TransportError("Network error"), transport="https")
        assert normalized.kind == ErrorKind.TRANSPORT
        assert normalized.raw_details is None

    def test_foreign_exception(self):
        normalized = normalize_exception(httpx.ConnectError("refused"), transport="primary")
        assert normalized.kind == ErrorKind.TRANSPORT
        assert normalized.message == "refused"
        assert normalized.raw_details == {"error_type": "ConnectError"}

    def test_foreign_exception_with_status_in_message(self):
        normalized = normalize_exception(RuntimeError("failed with status code 503"))
        assert normalized.http_status == 503

    def test_exception_without_message_uses_type_name(self):
        assert normalize_exception(ValueError()).message == "ValueError"


def test_encode_payload():
    assert encode_payload({"a": [1, "b"]}) == b'{"a": [1, "b"]}'
    assert encode_payload(None) == b"null"
    with pytest.raises(PayloadSerializationError):
        encode_payload({"s": {1, 2}})
