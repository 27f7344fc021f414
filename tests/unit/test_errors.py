# =============================================================================
# tests/unit/test_errors.py
# Unit Tests for the exception hierarchy and error reporting
# =============================================================================


class TestExceptions:
    """Test error codes and details"""

    def test_client_error_details(self):
        from fieldsync_core.errors import ServerError

        error = ServerError("Request aborted", aborted=True, method="POST", path="/maternal-health")

        assert error.to_dict() == {
            "error_type": "ServerError",
            "code": "API_500",
            "message": "Request aborted",
            "details": {"aborted": True, "method": "POST", "path": "/maternal-health"},
            "recoverable": True,
        }

    def test_auth_expired_is_not_recoverable(self):
        from fieldsync_core.errors import AuthExpiredError, ClientError

        error = AuthExpiredError(token="tok-123")

        assert isinstance(error, ClientError)
        assert error.status == 401
        assert error.code == "AUTH_001"
        assert not error.recoverable
        assert "tok-123" not in str(error)

    def test_validation_problems(self):
        from fieldsync_core.errors import ValidationError

        error = ValidationError("Please complete: Delivery date", problems=["Delivery date"])

        assert error.problems == ["Delivery date"]
        assert error.details["problems"] == ["Delivery date"]


class TestHandleError:
    """Test user-facing error reporting"""

    def test_server_error_is_shown_as_error(self, mock_streamlit):
        from fieldsync_core.errors import ServerError, handle_error

        handle_error(ServerError("HTTP 500"))

        mock_streamlit.error.assert_called_once_with("Error: HTTP 500")

    def test_rejected_input_is_shown_as_warning(self, mock_streamlit):
        from fieldsync_core.errors import ValidationError, handle_error

        handle_error(ValidationError("Please complete: Delivery date"))

        mock_streamlit.warning.assert_called_once_with("Please complete: Delivery date")
        mock_streamlit.error.assert_not_called()

    def test_expired_session_is_shown_as_warning(self, mock_streamlit):
        from fieldsync_core.errors import AuthExpiredError, handle_error

        handle_error(AuthExpiredError())

        mock_streamlit.warning.assert_called_once_with("Session expired. Please sign in again.")

    def test_non_recoverable_error_has_no_prefix(self, mock_streamlit):
        from fieldsync_core.errors import ConfigurationError, handle_error

        handle_error(ConfigurationError("API base URL is empty", config_key="api_base"))

        mock_streamlit.error.assert_called_once_with("API base URL is empty")

    def test_can_stay_silent(self, mock_streamlit, caplog):
        from fieldsync_core.errors import StorageError, handle_error

        handle_error(StorageError("disk full", key="token"), show_user_message=False)

        mock_streamlit.error.assert_not_called()
        assert "[STORE_001] disk full" in caplog.text

    def test_custom_message(self, mock_streamlit):
        from fieldsync_core.errors import handle_error

        handle_error(RuntimeError("socket closed"), user_message="Could not load the dashboard")

        mock_streamlit.error.assert_called_once_with("Error: Could not load the dashboard")
