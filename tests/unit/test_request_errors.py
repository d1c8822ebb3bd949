# Assumptions:
# - Using pytest for testing framework
# - Error kind is derived from status code and timeout flag

from api_interaction.http.errors import (
    HttpAdapterError,
    OperationCancelledError,
    RequestError,
    RequestErrorKind,
)


class TestRequestError:
    """Test cases for adapter error types"""

    def test_transport_failure(self):
        error = RequestError("Name or service not known")

        assert error.kind is RequestErrorKind.TRANSPORT_FAILURE
        assert error.status_code is None
        assert error.is_timed_out is False
        assert str(error) == "Name or service not known"

    def test_non_success_status(self):
        error = RequestError("Not Found", status_code=404)

        assert error.kind is RequestErrorKind.NON_SUCCESS_STATUS
        assert str(error) == "[404] Not Found"

    def test_timeout(self):
        error = RequestError("Connection to https://example timed out", is_timed_out=True)

        assert error.kind is RequestErrorKind.TIMEOUT
        assert error.status_code is None

    def test_cancellation_is_not_a_request_error(self):
        """Test cancellation is distinguishable from every RequestError kind"""
        error = OperationCancelledError()

        assert isinstance(error, HttpAdapterError)
        assert not isinstance(error, RequestError)
        assert error.message == "The operation was cancelled"
