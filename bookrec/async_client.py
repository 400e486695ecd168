"""Async HTTP client for the generative language API."""
import httpx
from typing import List, Optional, Dict, Any
import logging

from bookrec.client import DEFAULT_BASE_URL
from bookrec.errors import ApiStatusError, ConnectivityError, ResponseParseError
from bookrec.models import Book
from bookrec.parse import extract_candidate_text, parse_books_text
from bookrec.prompts import build_request_body

logger = logging.getLogger(__name__)


class AsyncRecommendationClient:
    """Async client used by the view controller."""

    def __init__(
        self,
        api_key: Optional[str],
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = 30,
        client: Optional[httpx.AsyncClient] = None
    ):
        """
        Initialize async client.

        Args:
            api_key: API key sent as the ``key`` query parameter
            base_url: generateContent endpoint URL
            timeout: Request timeout
            client: Optional pre-built httpx client
        """
        if not api_key:
            raise ValueError("An API key is required; set GEMINI_API_KEY")

        self.api_key = api_key
        self.base_url = base_url
        self.timeout = timeout

        # Create async HTTP client
        self.client = client or httpx.AsyncClient(timeout=timeout)

    async def generate(self, prompt: str) -> str:
        """
        Send a prompt and return the first candidate's text.

        Args:
            prompt: Natural-language instruction

        Returns:
            Raw candidate text
        """
        if not prompt:
            raise ValueError("Prompt must not be empty")

        response_json = await self._post(build_request_body(prompt))
        text = extract_candidate_text(response_json)
        logger.debug(f"Candidate output: {text}")
        return text

    async def fetch_books(self, prompt: str) -> List[Book]:
        """
        Send a prompt and parse the reply into books.

        Args:
            prompt: Natural-language instruction asking for a 'books' JSON object

        Returns:
            Books in response order
        """
        books = parse_books_text(await self.generate(prompt))
        logger.info(f"Parsed {len(books)} books")
        return books

    async def _post(self, body: Dict[str, Any]) -> Any:
        try:
            logger.info(f"Async request: POST {self.base_url}")
            response = await self.client.post(
                self.base_url,
                params={"key": self.api_key},
                json=body,
                headers={"Content-Type": "application/json"},
            )

        except httpx.TimeoutException as e:
            logger.warning("Async request timed out")
            raise ConnectivityError(str(e)) from e

        except httpx.RequestError as e:
            logger.warning(f"Async request failed: {e}")
            raise ConnectivityError(str(e)) from e

        if response.status_code != 200:
            logger.warning(f"Status {response.status_code} from {self.base_url}")
            raise ApiStatusError(response.status_code)

        try:
            return response.json()
        except ValueError as e:
            raise ResponseParseError(f"Response body is not JSON: {e}") from e

    async def close(self):
        """Close the HTTP client."""
        await self.client.aclose()

    async def __aenter__(self):
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit."""
        await self.close()
