"""Command-line front door for jumpnav.

Records jump locations, lists the jump list, clears hidden marks, and
runs the interactive navigator with ``pick``.
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from . import start
from .display import SYMBOL_HIDDEN, position_marker
from .editor import launch_editor
from .hide import HiddenRegistry
from .history import JumpLocation, load_history, save_history
from .host import TerminalHost
from .items import JumpItem, create_item
from .session import Target


def _location(value: str) -> JumpLocation:
    """argparse type for ``PATH[:LINE[:COL]]`` locations."""
    try:
        return JumpLocation.parse(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(str(exc)) from exc


def format_item(item: JumpItem, hidden: bool = False) -> str:
    marker = SYMBOL_HIDDEN if hidden else position_marker(item)
    return f"{marker:>4} {item.path}:{item.line}:{item.column}"


def cmd_record(args: argparse.Namespace) -> int:
    history = load_history()
    history.record(args.location)
    save_history(history)
    return 0


def cmd_list(args: argparse.Namespace) -> int:
    history = load_history()
    registry = HiddenRegistry()
    if not history.entries:
        print("No jumps recorded.")
        return 0
    items = [create_item(location, index, history.current) for index, location in enumerate(history.entries, 1)]
    for item in reversed(items):
        print(format_item(item, hidden=registry.is_hidden(item)))
    return 0


def cmd_clear_hidden(args: argparse.Namespace) -> int:
    HiddenRegistry().clear()
    return 0


def cmd_pick(args: argparse.Namespace) -> int:
    if not sys.stdin.isatty():
        raise SystemExit("pick needs an interactive terminal.")

    history = load_history()
    origin = ""
    if history.entries:
        origin = str(history.entries[history.current].path)
    chosen_target: list[Target] = []

    def remember_target(item: JumpItem, target: Target) -> None:
        chosen_target.append(target)

    item = start(
        {"offset": args.offset},
        host=TerminalHost.from_std(path=origin),
        history=history,
        choose=remember_target,
    )
    if item is None:
        return 1

    print(f"{item.path}:{item.line}:{item.column}")
    if args.open:
        target = chosen_target[-1] if chosen_target else Target(path=origin)
        error = launch_editor(Path(item.path), item.line, layout=target.layout, origin=target.path)
        if error:
            raise SystemExit(error)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="jumpnav",
        description="Record file positions and navigate the jump history interactively.",
    )
    commands = parser.add_subparsers(dest="command", required=True)

    record = commands.add_parser("record", help="Append PATH[:LINE[:COL]] to the jump list.")
    record.add_argument("location", type=_location, help="Location to record.")
    record.set_defaults(func=cmd_record)

    listing = commands.add_parser("list", help="Print the jump list, newest first.")
    listing.set_defaults(func=cmd_list)

    pick = commands.add_parser("pick", help="Choose a jump interactively.")
    pick.add_argument(
        "--offset",
        type=int,
        default=-1,
        help="Initial selection relative to the current entry (default: -1).",
    )
    pick.add_argument("--open", action="store_true", help="Open the chosen location in $EDITOR.")
    pick.set_defaults(func=cmd_pick)

    clear = commands.add_parser("clear-hidden", help="Forget all hidden marks.")
    clear.set_defaults(func=cmd_clear_hidden)
    return parser


def main(argv: list[str] | None = None) -> int:
    """Parse CLI arguments and run the selected subcommand."""
    args = build_parser().parse_args(argv)
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
