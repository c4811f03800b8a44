"""Command-line interface for playing Sudoku sessions."""

import argparse
import logging
import sys
import time
from typing import Callable, Optional

from .config import SessionConfig
from .core.board import Board
from .core.cell import Digit, NoteSet
from .session import (
    Command, SelectCell, ClearSelection, EnterDigit, Undo, ToggleNotesMode, Clue,
    Difficulty, PuzzleRecord, SessionController, SessionState, Status,
)
from .storage import JsonSessionStore, JsonStatisticsRecorder, format_time

HELP_TEXT = """Commands:
  select R C   select the cell at row R, column C (1-9)
  clear        drop the selection
  D / digit D  enter digit D (1-9) into the selected cell
  notes        toggle notes mode
  undo         undo the last move
  clue         reveal all candidates, then one digit per clue
  pause        pause the timer
  resume       resume the timer
  restart      start the puzzle over
  help         show this text
  quit         save and leave"""


def main():
    """Main entry point for the CLI."""
    parser = argparse.ArgumentParser(
        description="Play Sudoku in the terminal",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Start a new puzzle
  sudoku-session play --puzzle "530070000..." --solution "534678912..." -d hard

  # Continue the saved puzzle
  sudoku-session play --resume

  # Show statistics and write charts
  sudoku-session stats --chart charts/
        """
    )
    parser.add_argument(
        "--log-level", default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level (default: WARNING)"
    )
    parser.add_argument(
        "--store", type=str, default="sudoku_session.json",
        help="File holding the saved session (default: sudoku_session.json)"
    )
    parser.add_argument(
        "--stats", type=str, default="sudoku_stats.json",
        help="File holding game statistics (default: sudoku_stats.json)"
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    play_parser = subparsers.add_parser("play", help="Play a puzzle")
    play_parser.add_argument(
        "--puzzle", "-p", type=str, default=None,
        help="Puzzle string (81 chars, 0 for empty cells)"
    )
    play_parser.add_argument(
        "--solution", type=str, default=None,
        help="Solution string (81 chars)"
    )
    play_parser.add_argument(
        "--difficulty", "-d",
        choices=["easy", "medium", "hard"],
        default="medium",
        help="Difficulty recorded with the game (default: medium)"
    )
    play_parser.add_argument(
        "--resume", action="store_true",
        help="Continue the saved session"
    )
    play_parser.add_argument(
        "--max-mistakes", type=int, default=3,
        help="Mistakes that end the game (default: 3)"
    )
    play_parser.add_argument(
        "--seed", "-s", type=int, default=None,
        help="Random seed for clues"
    )
    play_parser.add_argument(
        "--strict", action="store_true",
        help="Fail loudly on internal invariant violations"
    )

    stats_parser = subparsers.add_parser("stats", help="Show game statistics")
    stats_parser.add_argument(
        "--chart", type=str, default=None,
        help="Directory to write charts to"
    )
    stats_parser.add_argument(
        "--reset", action="store_true",
        help="Clear all statistics"
    )

    args = parser.parse_args()
    logging.basicConfig(level=args.log_level,
                        format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    if args.command is None:
        parser.print_help()
        sys.exit(1)

    if args.command == "play":
        cmd_play(args)
    elif args.command == "stats":
        cmd_stats(args)


def cmd_play(args):
    """Handle the play command."""
    config = SessionConfig(max_mistakes=args.max_mistakes, seed=args.seed, strict=args.strict)
    store = JsonSessionStore(args.store)
    statistics = JsonStatisticsRecorder(args.stats)

    if args.resume:
        controller = SessionController.from_store(store, statistics, config)
        if controller is None:
            print(f"No saved session in {args.store}")
            sys.exit(1)
    else:
        if not args.puzzle or not args.solution:
            print("Both --puzzle and --solution are required for a new game")
            sys.exit(1)
        try:
            board = Board.from_string(args.puzzle, args.solution)
        except ValueError as e:
            print(f"Error parsing puzzle: {e}")
            sys.exit(1)

        # Starting over while a game is saved gives that game up.
        previous = SessionController.from_store(store, statistics, config)
        if previous is not None and previous.status is Status.ACTIVE:
            previous.abandon()
            print(f"Previous {previous.difficulty.value} game recorded as abandoned")

        record = PuzzleRecord.new(board.puzzle.tolist(), board.solution.tolist(),
                                  Difficulty.parse(args.difficulty))
        controller = SessionController(record, store, statistics, config)

    play(controller)


def play(controller: SessionController, read: Callable[[str], str] = input,
         clock: Callable[[], float] = time.monotonic) -> None:
    """
    Run the interactive loop until the player quits or input ends.

    Elapsed time advances by one tick per `tick_seconds` of wall-clock time
    between inputs.
    """
    tick_seconds = controller.config.tick_seconds
    last = clock()
    print(HELP_TEXT)

    while True:
        print()
        print(render_state(controller.state, controller.config.max_mistakes))
        try:
            line = read("> ")
        except (EOFError, KeyboardInterrupt):
            print()
            break

        now = clock()
        ticks = int((now - last) // tick_seconds)
        for _ in range(ticks):
            controller.tick()
        last += ticks * tick_seconds

        words = line.strip().lower().split()
        if not words:
            continue
        if words[0] in ("quit", "exit", "q"):
            break
        if words[0] == "help":
            print(HELP_TEXT)
            continue
        if words[0] == "pause":
            controller.pause()
            continue
        if words[0] == "resume":
            controller.resume()
            last = clock()
            continue
        if words[0] == "restart":
            controller.restart()
            continue

        command = parse_command(words)
        if command is None:
            print(f"Unknown command: {line.strip()!r} (type 'help')")
            continue

        previous = controller.status
        controller.dispatch(command)
        if controller.status is not previous:
            if controller.status is Status.COMPLETED:
                print(f"\nSolved in {format_time(controller.state.elapsed_seconds)}!")
            else:
                print(f"\nGame over: {controller.state.mistakes} mistakes.")
            print("Type 'restart' to play again or 'quit' to leave.")

    controller.exit()
    if controller.status is Status.ACTIVE:
        print("Session saved.")


def parse_command(words) -> Optional[Command]:
    """Translate a tokenized input line into a command, or None."""
    head = words[0]
    try:
        if head == "select" and len(words) == 3:
            return SelectCell(int(words[1]) - 1, int(words[2]) - 1)
        if head == "digit" and len(words) == 2:
            return EnterDigit(int(words[1]))
        if len(words) == 1 and head.isdigit() and len(head) == 1 and head != "0":
            return EnterDigit(int(head))
    except ValueError:
        return None
    simple = {
        "clear": ClearSelection,
        "notes": ToggleNotesMode,
        "undo": Undo,
        "clue": Clue,
    }
    if len(words) == 1 and head in simple:
        return simple[head]()
    return None


def render_state(state: SessionState, max_mistakes: int = 3) -> str:
    """Draw the board with the selection in brackets and a status line."""
    board = state.board
    lines = []
    horizontal_sep = "+" + ("-" * 9 + "+") * 3

    for row in range(9):
        if row % 3 == 0:
            lines.append(horizontal_sep)
        row_str = "|"
        for col in range(9):
            cell = board.get(row, col)
            if isinstance(cell, Digit):
                text = str(cell.value)
            elif isinstance(cell, NoteSet) and len(cell):
                text = "*"
            else:
                text = "."
            if state.selection == (row, col):
                row_str += f"[{text}]"
            else:
                row_str += f" {text} "
            if col % 3 == 2:
                row_str += "|"
        lines.append(row_str)
    lines.append(horizontal_sep)

    status = [
        f"Time {format_time(state.elapsed_seconds)}",
        f"Mistakes {state.mistakes}/{max_mistakes}",
        "Notes ON" if state.notes_mode else "Notes off",
    ]
    if state.paused:
        status.append("PAUSED")
    if state.status is not Status.ACTIVE:
        status.append(state.status.value.upper())
    cell = state.selected_cell
    if isinstance(cell, NoteSet):
        status.append(f"Notes {''.join(str(d) for d in sorted(cell.digits)) or '-'}")
    lines.append("  ".join(status))
    return "\n".join(lines)


def cmd_stats(args):
    """Handle the stats command."""
    recorder = JsonStatisticsRecorder(args.stats)

    if args.reset:
        recorder.clear()
        print("Statistics cleared")
        return

    stats = recorder.get_stats()
    print("=" * 40)
    print("SUDOKU STATISTICS")
    print("=" * 40)
    print(f"Games played:    {stats.total_games_played}")
    print(f"Completed:       {stats.games_completed} ({stats.win_rate:.1f}%)")
    print(f"Lost:            {stats.games_lost}")
    print(f"Abandoned:       {stats.games_abandoned}")
    if stats.fastest_time is not None:
        print(f"Fastest:         {format_time(stats.fastest_time)}")
        print(f"Slowest:         {format_time(stats.slowest_time)}")
        print(f"Average:         {format_time(int(stats.average_time))}")

    recent = recorder.recent_games()
    if recent:
        print("\nRecent games:")
        for record in recent:
            outcome = "completed" if record.completed else "lost" if record.lost else "abandoned"
            spent = format_time(record.time_spent) if record.time_spent is not None else "-"
            print(f"  {record.difficulty or '?':8} {outcome:10} {spent}")

    if args.chart:
        from .storage.visualizer import StatsVisualizer
        visualizer = StatsVisualizer(recorder.get_records(), args.chart)
        charts = visualizer.generate_all()
        print(f"\nCharts saved to {args.chart}/")
        for chart in charts:
            print(f"  - {chart.split('/')[-1]}")


if __name__ == "__main__":
    main()
