"""HTTP client for the generative language API."""
import requests
from typing import Optional, List, Dict, Any
import logging

from bookrec.errors import ApiStatusError, ConnectivityError, ResponseParseError
from bookrec.models import Book
from bookrec.parse import extract_candidate_text, parse_books_text
from bookrec.prompts import build_request_body

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = (
    "https://generativelanguage.googleapis.com/v1beta/models/gemini-1.5-flash:generateContent"
)


class RecommendationClient:
    """Client that asks a generative model for book recommendations.

    Each call is a single attempt; failures are raised as
    RecommendationError subclasses and never retried.
    """

    def __init__(
        self,
        api_key: Optional[str],
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = 30,
        session: Optional[requests.Session] = None
    ):
        """
        Initialize recommendation client.

        Args:
            api_key: API key sent as the ``key`` query parameter
            base_url: generateContent endpoint URL
            timeout: Request timeout in seconds
            session: Optional pre-built session
        """
        if not api_key:
            raise ValueError("An API key is required; set GEMINI_API_KEY")

        self.api_key = api_key
        self.base_url = base_url
        self.timeout = timeout

        # Create session for connection pooling
        self.session = session or requests.Session()

    def generate(self, prompt: str) -> str:
        """
        Send a prompt and return the first candidate's text.

        Args:
            prompt: Natural-language instruction

        Returns:
            Raw candidate text

        Raises:
            ApiStatusError: on a non-200 response
            ConnectivityError: on transport failure
            ResponseParseError: if the envelope is malformed
        """
        if not prompt:
            raise ValueError("Prompt must not be empty")

        response_json = self._post(build_request_body(prompt))
        text = extract_candidate_text(response_json)
        logger.debug(f"Candidate output: {text}")
        return text

    def fetch_books(self, prompt: str) -> List[Book]:
        """
        Send a prompt and parse the reply into books.

        Args:
            prompt: Natural-language instruction asking for a 'books' JSON object

        Returns:
            Books in response order
        """
        books = parse_books_text(self.generate(prompt))
        logger.info(f"Parsed {len(books)} books")
        return books

    def _post(self, body: Dict[str, Any]) -> Any:
        """
        POST a request body and decode the JSON reply.

        Args:
            body: Request body

        Returns:
            Decoded response JSON
        """
        try:
            logger.info(f"Request: POST {self.base_url}")

            response = self.session.post(
                self.base_url,
                params={"key": self.api_key},
                json=body,
                headers={"Content-Type": "application/json"},
                timeout=self.timeout
            )

        except requests.exceptions.Timeout as e:
            logger.warning("Request timed out")
            raise ConnectivityError(str(e)) from e

        except requests.exceptions.RequestException as e:
            logger.warning(f"Connection error: {e}")
            raise ConnectivityError(str(e)) from e

        if response.status_code != 200:
            logger.warning(f"Status {response.status_code}: {response.text[:200]}")
            raise ApiStatusError(response.status_code)

        try:
            return response.json()
        except ValueError as e:
            raise ResponseParseError(f"Response body is not JSON: {e}") from e

    def close(self):
        """Close the session."""
        self.session.close()

    def __enter__(self):
        """Context manager entry."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit."""
        self.close()
