#!/usr/bin/env python3
"""Book Recommendations CLI - generative model integration."""
import argparse
import asyncio
import sys
import json
from tabulate import tabulate
from bookrec.client import RecommendationClient
from bookrec.async_client import AsyncRecommendationClient
from bookrec.controller import BookController
from bookrec.config import Config
from bookrec.errors import RecommendationError
import logging

logger = logging.getLogger(__name__)

SHELL_HELP = """Commands:
  search <text>   search for books
  random          random popular books
  fav <n>         toggle favorite for result n
  favs            list favorites, numbered
  unfav <n>       remove favorite n
  show <n>        show details for result n
  show fav <n>    show details for favorite n
  clear           clear the search and show random picks
  quit            leave
"""


def configure_logging(level: str):
    """Configure root logging."""
    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(levelname)s - %(message)s'
    )


def build_async_client(config: Config) -> AsyncRecommendationClient:
    return AsyncRecommendationClient(
        api_key=config.GEMINI_API_KEY,
        base_url=config.GEMINI_BASE_URL,
        timeout=config.DEFAULT_TIMEOUT
    )


def display_books(books, format_type: str, favorites=()):
    """Display books in specified format."""
    if format_type == "table":
        headers = ["#", "Title", "Author", "Genre", "Rating", "Fav"]
        rows = [
            [
                i,
                book.title[:50] + "..." if len(book.title) > 50 else book.title,
                book.author[:30] + "..." if len(book.author) > 30 else book.author,
                book.genre,
                book.rating_str,
                "*" if book in favorites else ""
            ]
            for i, book in enumerate(books, 1)
        ]
        print("\n" + tabulate(rows, headers=headers, tablefmt="grid"))

    elif format_type == "json":
        print(json.dumps([book.to_dict() for book in books], indent=2))

    elif format_type == "compact":
        for i, book in enumerate(books, 1):
            print(f"{i}. {book.title} - {book.author}")


def display_details(book, is_favorite: bool):
    """Show every field of one book."""
    rows = [
        ["Title", book.title],
        ["Author", book.author],
        ["Genre", book.genre],
        ["Rating", book.rating_str],
        ["Favorite", "yes" if is_favorite else "no"],
        ["Image", book.image_url or "-"],
        ["Description", book.description],
    ]
    print("\n" + tabulate(rows, tablefmt="plain", maxcolwidths=[None, 70]))


class StateRenderer:
    """State listener printing fetch progress.

    Errors are printed once, when the fetch that produced them finishes.
    """

    def __init__(self):
        self.was_loading = False

    def __call__(self, state):
        if state.is_loading and not self.was_loading:
            print("Loading recommendations...")
        elif self.was_loading and not state.is_loading and state.error_message:
            print(f"Error: {state.error_message}")
        self.was_loading = state.is_loading


async def recommend_once(args, config: Config):
    """Run a single search or random request through the controller."""
    async with build_async_client(config) as client:
        controller = BookController(client)
        controller.subscribe(StateRenderer())

        if args.command == "search":
            await controller.search_books(args.query)
        else:
            await controller.random_recommendation()

        state = controller.state
        if state.error_message:
            return 1

        logger.info(f"Found {len(state.displayed_books)} books for: {state.current_query}")
        display_books(state.displayed_books, args.format)
        return 0


def ask_sync(args, config: Config):
    """Send a raw prompt with the synchronous client."""
    with RecommendationClient(
        api_key=config.GEMINI_API_KEY,
        base_url=config.GEMINI_BASE_URL,
        timeout=config.DEFAULT_TIMEOUT
    ) as client:
        books = client.fetch_books(args.prompt)
        display_books(books, args.format)
    return 0


def _pick(books, arg: str):
    """Resolve a 1-based number to a book in the given list."""
    try:
        index = int(arg)
    except ValueError:
        print(f"Not a number: {arg!r}")
        return None
    if not 1 <= index <= len(books):
        print(f"No result #{index}")
        return None
    return books[index - 1]


async def handle_command(controller: BookController, line: str) -> bool:
    """
    Execute one shell command.

    Returns:
        False when the session should end
    """
    command, _, arg = line.strip().partition(" ")
    arg = arg.strip()

    if command in ("quit", "exit"):
        return False

    if command == "search":
        await controller.search_books(arg)
        display_books(controller.state.displayed_books, "table", controller.state.favorite_books)
    elif command == "random":
        await controller.random_recommendation()
        display_books(controller.state.displayed_books, "table", controller.state.favorite_books)
    elif command == "clear":
        await controller.clear_search()
        display_books(controller.state.displayed_books, "table", controller.state.favorite_books)
    elif command == "fav":
        book = _pick(controller.state.displayed_books, arg)
        if book:
            controller.toggle_favorite(book)
            status = "added to" if controller.is_favorite(book) else "removed from"
            print(f"{book.title} {status} favorites")
    elif command == "unfav":
        book = _pick(controller.state.favorite_books, arg)
        if book:
            controller.toggle_favorite(book)
            print(f"{book.title} removed from favorites")
    elif command == "favs":
        if controller.state.favorite_books:
            display_books(controller.state.favorite_books, "compact")
        else:
            print("No favorites yet")
    elif command == "show":
        source, _, number = arg.rpartition(" ")
        if source == "fav":
            book = _pick(controller.state.favorite_books, number)
        else:
            book = _pick(controller.state.displayed_books, arg)
        if book:
            display_details(book, controller.is_favorite(book))
    elif command:
        print(SHELL_HELP)

    return True


async def run_shell(config: Config):
    """Interactive session holding one controller."""
    loop = asyncio.get_running_loop()

    async with build_async_client(config) as client:
        controller = BookController(client)
        controller.subscribe(StateRenderer())

        print(SHELL_HELP)
        await controller.startup()
        display_books(controller.state.displayed_books, "table")

        while True:
            try:
                line = await loop.run_in_executor(None, input, "books> ")
            except EOFError:
                break
            if not await handle_command(controller, line):
                break
    return 0


def main():
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Book Recommendations - generative model CLI",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Search for books
  %(prog)s search "cozy mysteries set in Scotland"

  # Random popular picks as JSON
  %(prog)s random --format json

  # Interactive session with favorites
  %(prog)s shell
        """
    )

    subparsers = parser.add_subparsers(dest="command", help="Command to execute")

    search_parser = subparsers.add_parser("search", help="Search for books")
    search_parser.add_argument("query", help="Free-text search")

    random_parser = subparsers.add_parser("random", help="Recommend random popular books")

    ask_parser = subparsers.add_parser("ask", help="Send a raw prompt (synchronous client)")
    ask_parser.add_argument("prompt", help="Prompt asking for a JSON object with a 'books' list")

    for sub in (search_parser, random_parser, ask_parser):
        sub.add_argument("--format", choices=["table", "json", "compact"], default="table", help="Output format")

    subparsers.add_parser("shell", help="Interactive session")

    args = parser.parse_args()

    if not args.command:
        parser.print_help()
        sys.exit(1)

    config = Config()
    configure_logging(config.LOG_LEVEL)

    try:
        if args.command in ("search", "random"):
            code = asyncio.run(recommend_once(args, config))
        elif args.command == "ask":
            code = ask_sync(args, config)
        else:
            code = asyncio.run(run_shell(config))

    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        sys.exit(0)
    except RecommendationError as e:
        logger.error(e.user_message)
        sys.exit(1)
    except Exception as e:
        logger.error(f"Error: {e}", exc_info=True)
        sys.exit(1)

    sys.exit(code)


if __name__ == "__main__":
    main()
