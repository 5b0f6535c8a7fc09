"""Authentication API endpoints."""

from focusflow_cli.services.api.client import SESSION_COOKIE_NAME, APIClient


class AuthAPI:
    """Authentication API client (session-cookie based)."""

    def __init__(self, client: APIClient):
        self.client = client

    def login(self, email: str, password: str) -> tuple[dict, str]:
        """Login with email and password.

        Returns the user payload and the session cookie set by the server.

        Raises:
            RuntimeError: If the server did not set a session cookie
        """
        response = self.client.post(
            "/auth/login",
            json={"email": email, "password": password},
        )
        session_cookie = response.cookies.get(SESSION_COOKIE_NAME)
        if not session_cookie:
            raise RuntimeError("Server did not set a session cookie")

        self.client.session_cookie = session_cookie
        return response.json(), session_cookie

