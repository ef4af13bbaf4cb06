from __future__ import annotations

import argparse
import logging
import os
import random
from typing import Callable, List, Optional

from .deal import validate_dimensions
from .engine import Clock, GameEngine, Phase, counter_labels, new_game
from .ledger import ScoreLedger

MIN_SIZE = 2
MAX_SIZE = 6

HELP_TEXT = """Commands:
  r c              flip the card at row r, column c
  u                undo the last flip
  h                hint
  s                high scores
  a                analysis
  p r1 c1 r2 c2    shortest path between two cells
  q                quit"""

MENU_TEXT = """Main menu:
  1  start a new game
  2  high scores
  3  analysis of the last game
  4  how to play
  5  exit"""


def debug_enabled() -> bool:
    return os.getenv("MATCH_DEBUG", "0").lower() in ("1", "true", "yes", "on")


def configure_logging() -> None:
    logging.basicConfig(
        level=logging.DEBUG if debug_enabled() else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _size(text: str) -> int:
    value = int(text)
    if not MIN_SIZE <= value <= MAX_SIZE:
        raise argparse.ArgumentTypeError(f"size must be between {MIN_SIZE} and {MAX_SIZE}")
    return value


def print_board(game: GameEngine) -> None:
    print("    " + " ".join(str(c) for c in range(game.cols)))
    for r, line in enumerate(game.pretty().splitlines()):
        print(f"{r:>2}  {line}")
    print(status_line(game))


def status_line(game: GameEngine) -> str:
    return f"Score: {game.score} | Moves: {game.moves} | Time: {game.elapsed_ms // 1000}s"


def print_high_scores(ledger: ScoreLedger, limit: int = 10) -> None:
    entries = ledger.top_n(limit)
    if not entries:
        print("No high scores yet!")
        return
    print("===== HIGH SCORES =====")
    for i, entry in enumerate(entries, start=1):
        print(f"{i}. {entry.label}: {entry.score}")


def print_analysis(game: GameEngine) -> None:
    analysis = game.get_analysis()
    history, graph, index = analysis["history"], analysis["graph"], analysis["index"]
    print(f"Move history: {history['total_moves']} flips recorded, last move available: {history['has_last_move']}")
    print(f"Graph: {graph['connected_components']} component(s), largest {graph['largest_component']}, "
          f"{graph['total_vertices']} vertices, {graph['edges']} edges")
    print(f"Index: {index['stored_keys']} cards in {index['table_size']} buckets, longest chain {index['longest_chain']}")
    print(f"Sorted by symbol: {analysis['sorting']['by_symbol']}, by position: {analysis['sorting']['by_position']}")


def print_hint(game: GameEngine) -> None:
    hint = game.hint()
    print(hint.message)
    if hint.positions:
        print("At:", ", ".join(f"({p.row}, {p.col})" for p in hint.positions))


def run_command(game: GameEngine, text: str, read: Callable[[str], str] = input) -> bool:
    """Executes one command line. Returns False when the player quits."""
    parts: List[str] = text.split()
    if not parts:
        return True
    cmd = parts[0].lower()
    if cmd == "q":
        return False
    if cmd == "u":
        print(game.undo().message)
    elif cmd == "h":
        print_hint(game)
    elif cmd == "s":
        print_high_scores(game.ledger)
    elif cmd == "a":
        print_analysis(game)
    elif cmd == "p":
        try:
            r1, c1, r2, c2 = (int(x) for x in parts[1:5])
        except ValueError:
            print("Usage: p r1 c1 r2 c2")
            return True
        result = game.path_analysis((r1, c1), (r2, c2))
        if result is None:
            print("No path between those cells.")
        else:
            print(f"{result['steps']} step(s):", " -> ".join(f"({p.row}, {p.col})" for p in result["positions"]))
    else:
        try:
            r, c = (int(x) for x in text.replace(",", " ").split())
        except ValueError:
            print("Could not parse. Type ? for help.")
            return True
        outcome = game.flip(r, c)
        print(outcome.message)
        print_board(game)
        if outcome.ok and len(game.pending) == 2:
            # the engine leaves a mismatched pair face up until told otherwise
            read("Press Enter to flip them back...")
            print(game.flip_back().message)
            print_board(game)
    return True


def play(game: GameEngine, read: Callable[[str], str] = input) -> None:
    print(HELP_TEXT)
    print_board(game)
    while game.phase is Phase.PLAYING:
        text = read("> ").strip()
        if text == "?":
            print(HELP_TEXT)
            continue
        if not run_command(game, text, read):
            return
    print(f"You won in {game.moves} moves and {game.elapsed_ms / 1000:.1f} seconds. Final score: {game.score}")
    print_high_scores(game.ledger)


def session(
    rows: int,
    cols: int,
    seed: Optional[int] = None,
    read: Callable[[str], str] = input,
    clock: Optional[Clock] = None,
) -> None:
    """
    Main menu loop. Every game of the session shares one score ledger and one
    label counter, so high scores accumulate until the player exits. A seed
    makes the whole sequence of deals reproducible.
    """
    rng = random.Random(seed)
    ledger = ScoreLedger()
    labels = counter_labels()
    game: Optional[GameEngine] = None
    while True:
        print(MENU_TEXT)
        choice = read("Choice: ").strip().lower()
        if choice == "1":
            outcome, game = new_game(rows, cols, rng=rng, clock=clock, ledger=ledger, label_source=labels)
            print(outcome.message)
            play(game, read)
        elif choice == "2":
            print_high_scores(ledger)
        elif choice == "3":
            if game is None:
                print("Start a game first.")
            else:
                print_analysis(game)
        elif choice == "4":
            print(HELP_TEXT)
        elif choice in ("5", "q"):
            return
        else:
            print("Invalid choice. Please try again.")


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Card matching puzzle")
    parser.add_argument("--rows", type=_size, default=4, help=f"Grid rows ({MIN_SIZE}-{MAX_SIZE})")
    parser.add_argument("--cols", type=_size, default=4, help=f"Grid columns ({MIN_SIZE}-{MAX_SIZE})")
    parser.add_argument("--seed", type=int, default=None, help="RNG seed for the deals")
    parser.add_argument("--play", action="store_true", help="Open the main menu and play interactively")
    args = parser.parse_args(argv)
    configure_logging()

    reason = validate_dimensions(args.rows, args.cols)
    if reason is not None:
        print(f"error: {reason}")
        return 2

    if args.play:
        try:
            session(args.rows, args.cols, seed=args.seed)
        except (EOFError, KeyboardInterrupt):
            print()
        return 0

    _, game = new_game(args.rows, args.cols, seed=args.seed)
    print("Initial board:")
    print_board(game)
    print()
    print_analysis(game)
    print_hint(game)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
