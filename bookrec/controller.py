"""View state controller for the recommendation screen."""
import logging
from typing import Callable, List

from bookrec.errors import RecommendationError
from bookrec.models import Book, ViewState
from bookrec.prompts import random_prompt, search_prompt

logger = logging.getLogger(__name__)

Listener = Callable[[ViewState], None]


class BookController:
    """
    Owns the screen state and the intents that change it.

    Renderers read ``state`` and subscribe for change notifications; the
    intents below are the only way state is mutated. Only one fetch runs at
    a time: triggers that arrive while a fetch is in flight are ignored.
    """

    def __init__(self, client):
        """
        Args:
            client: Object with an async ``fetch_books(prompt)`` method
        """
        self.client = client
        self.state = ViewState()
        self._listeners: List[Listener] = []

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a change listener; returns a function that removes it."""
        self._listeners.append(listener)

        def unsubscribe():
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _commit(self):
        for listener in list(self._listeners):
            try:
                listener(self.state)
            except Exception:
                logger.exception("State listener failed")

    async def fetch_books(self, prompt: str) -> None:
        """
        Fetch books for a prompt and apply the result to state.

        Errors are recorded in ``state.error_message``; the previous
        results stay displayed. The loading flag is cleared on every exit.
        """
        if not prompt:
            return

        if self.state.is_loading:
            logger.info("Fetch already in flight; ignoring new request")
            return

        self.state.is_loading = True
        self.state.current_query = prompt
        self.state.error_message = None
        self._commit()

        try:
            books = await self.client.fetch_books(prompt)
            self.state.displayed_books = books
            logger.info(f"Displaying {len(books)} books")
        except RecommendationError as e:
            logger.error(f"Fetch failed: {e}")
            self.state.error_message = e.user_message
        finally:
            self.state.is_loading = False
            self._commit()

    async def search_books(self, query: str) -> None:
        """Ask for books matching a free-text query."""
        if not query.strip():
            return
        await self.fetch_books(search_prompt(query))

    async def random_recommendation(self) -> None:
        """Ask for a handful of popular books."""
        await self.fetch_books(random_prompt())

    async def startup(self) -> None:
        """Load the initial recommendations."""
        await self.random_recommendation()

    async def clear_search(self) -> None:
        """Drop the current query and fall back to random picks."""
        if self.state.is_loading:
            logger.info("Fetch already in flight; ignoring clear")
            return

        self.state.current_query = ""
        self._commit()
        await self.random_recommendation()

    def is_favorite(self, book: Book) -> bool:
        """Whether the book is in the favorites list."""
        return book in self.state.favorite_books

    def toggle_favorite(self, book: Book) -> None:
        """Add the book to favorites, or remove it if already there."""
        favorites = self.state.favorite_books
        if book in favorites:
            favorites.remove(book)
        else:
            favorites.append(book)
        self._commit()
