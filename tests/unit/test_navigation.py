# =============================================================================
# tests/unit/test_navigation.py
# Unit Tests for navigation intents
# =============================================================================


class TestNavigationIntent:
    """Test the default session-lost callback"""

    def test_redirect_clears_auth_state(self, mock_streamlit):
        from fieldsync_core.auth import SIGN_IN_PAGE, consume_nav_intent, consume_notice, redirect_to_sign_in

        mock_streamlit.session_state.update({"authenticated": True, "name": "Meera", "theme": "dark"})

        redirect_to_sign_in()

        assert "authenticated" not in mock_streamlit.session_state
        assert "name" not in mock_streamlit.session_state
        assert mock_streamlit.session_state["theme"] == "dark"
        assert consume_nav_intent() == SIGN_IN_PAGE
        assert consume_notice() == "Your session expired. Please sign in again."

    def test_intent_is_consumed_once(self, mock_streamlit):
        from fieldsync_core.auth import consume_nav_intent, redirect_to_sign_in

        redirect_to_sign_in("Signed out")

        assert consume_nav_intent() is not None
        assert consume_nav_intent() is None

