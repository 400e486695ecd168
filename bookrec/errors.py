"""Errors raised while fetching recommendations."""


class RecommendationError(Exception):
    """Base error carrying a message suitable for showing to the user."""

    user_message = "Something went wrong."

    def __init__(self, detail: str = ""):
        super().__init__(detail or self.user_message)
        self.detail = detail


class ApiStatusError(RecommendationError):
    """The model endpoint answered with a non-200 status."""

    def __init__(self, status_code: int, detail: str = ""):
        super().__init__(detail or f"HTTP {status_code}")
        self.status_code = status_code

    @property
    def user_message(self) -> str:
        return f"Failed to fetch books. Status code: {self.status_code}"


class ConnectivityError(RecommendationError):
    """Transport-level failure: DNS, refused connection, timeout."""

    user_message = "Network error. Please check your connection."


class ResponseParseError(RecommendationError):
    """The response did not have the expected shape."""

    user_message = "Could not parse recommendations."
