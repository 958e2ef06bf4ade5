"""
Goldfish CLI - Command-line interface for the engine.

Usage:
    goldfish serve                      Run the REST API
    goldfish parse <deck_file>          Show how a deck list is read
    goldfish draw <deck_file> [-n 7]    Shuffle a deck and draw a hand
"""

import argparse
import logging
import sys

from .config import GOLDFISH_HOST, GOLDFISH_LOG_LEVEL, GOLDFISH_PORT

logger = logging.getLogger(__name__)


def main(argv=None):
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Goldfish - Single-player card table engine",
        prog="goldfish",
    )
    parser.add_argument("--log-level", default=GOLDFISH_LOG_LEVEL, help="Logging level")
    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # Serve command
    serve_parser = subparsers.add_parser("serve", help="Run the REST API")
    serve_parser.add_argument("--host", default=GOLDFISH_HOST, help="Bind address")
    serve_parser.add_argument("--port", type=int, default=GOLDFISH_PORT, help="Bind port")

    # Parse command
    parse_parser = subparsers.add_parser("parse", help="Show how a deck list is read")
    parse_parser.add_argument("deck_file", help="Path to deck list text file")

    # Draw command
    draw_parser = subparsers.add_parser("draw", help="Shuffle a deck and draw a hand")
    draw_parser.add_argument("deck_file", help="Path to deck list text file")
    draw_parser.add_argument("--count", "-n", type=int, default=7, help="Cards to draw")
    draw_parser.add_argument("--seed", type=int, default=None, help="Seed for the shuffle")

    args = parser.parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, str(args.log_level).upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.command == "serve":
        cmd_serve(args)
    elif args.command == "parse":
        cmd_parse(args)
    elif args.command == "draw":
        cmd_draw(args)
    else:
        parser.print_help()
        sys.exit(1)


def _read_deck_file(path: str) -> str:
    try:
        with open(path, "r", encoding="utf-8") as f:
            return f.read()
    except FileNotFoundError:
        print(f"Error: File not found: {path}")
        sys.exit(1)


def cmd_serve(args):
    """Run the REST API with uvicorn."""
    import uvicorn

    logger.info("Serving on %s:%d", args.host, args.port)
    uvicorn.run(
        "goldfish.api.app:create_app",
        factory=True,
        host=args.host,
        port=args.port,
    )


def cmd_parse(args):
    """Print the normalized deck list."""
    from .deck_list import summarize_deck_list
    from .engine_core.errors import ValidationError

    text = _read_deck_file(args.deck_file)
    try:
        lines = summarize_deck_list(text)
    except ValidationError as e:
        print(f"Error: {e.message}")
        sys.exit(1)

    total = 0
    for line in lines:
        print(f"{line.count:>3} {line.name}")
        total += line.count
    print(f"\n{total} cards, {len(lines)} unique")


def cmd_draw(args):
    """Import a deck, shuffle it and draw an opening hand."""
    from .engine_core import Providers, create_session
    from .engine_core.operations import draw_cards, import_deck, shuffle_library

    text = _read_deck_file(args.deck_file)
    providers = Providers.seeded(args.seed) if args.seed is not None else Providers()

    session = create_session(deck=[], providers=providers)
    for step in (
        lambda s: import_deck(s, text, providers=providers),
        lambda s: shuffle_library(s, providers=providers),
        lambda s: draw_cards(s, args.count, providers=providers),
    ):
        result = step(session)
        if not result.success:
            print(f"Error: {result.error}")
            sys.exit(1)
        session = result.new_state

    print(f"Drew {session.hand.count} card(s):")
    for card in session.hand:
        print(f"  {card.name}")
    print(f"\n{session.library.count} card(s) left in library")


if __name__ == "__main__":
    main()
