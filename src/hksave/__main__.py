"""
Entry point for HKSave.
"""

import argparse
import curses
import logging
import sys
from typing import List, Optional

from .core.errors import SaveEditorError
from .core.fields import FIELD_REGISTRY, PRESETS, format_value
from .core.session import SaveSession
from .core.syntax import highlight_text
from .ui.input_handler import InputHandler
from .ui.window import WindowManager

logger = logging.getLogger('hksave')

COMMANDS = ('edit', 'show', 'set', 'hex', 'text', 'import-hex')


def build_parser() -> argparse.ArgumentParser:
    """Build the command line parser."""

    common = argparse.ArgumentParser(add_help=False)
    common.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Log debug output to stderr"
    )

    parser = argparse.ArgumentParser(
        prog="hksave",
        description="HKSave - Hollow Knight save editor with hex view"
    )
    subparsers = parser.add_subparsers(dest="command")

    edit = subparsers.add_parser("edit", parents=[common], help="Open the interactive editor (default)")
    edit.add_argument("file", nargs="?", help="Save file (.dat) to open")

    show = subparsers.add_parser("show", parents=[common], help="Print the recognized fields")
    show.add_argument("file", help="Save file (.dat)")

    set_cmd = subparsers.add_parser("set", parents=[common], help="Change fields and write a modified copy")
    set_cmd.add_argument("file", help="Save file (.dat)")
    set_cmd.add_argument("assignments", nargs="*", metavar="name=value", help="Field values to set")
    set_cmd.add_argument(
        "-p", "--preset",
        action="append",
        default=[],
        choices=sorted(PRESETS),
        help="Quick modification to apply before the assignments"
    )
    set_cmd.add_argument("-o", "--output", help="Output path (default: <name>_modified.dat)")

    hex_cmd = subparsers.add_parser("hex", parents=[common], help="Print the hex representation")
    hex_cmd.add_argument("file", help="Save file (.dat)")

    text = subparsers.add_parser("text", parents=[common], help="Print the save text")
    text.add_argument("file", help="Save file (.dat)")
    text.add_argument("--no-color", action="store_true", help="Disable syntax highlighting")

    import_hex = subparsers.add_parser(
        "import-hex", parents=[common], help="Rebuild a save file from edited hex text"
    )
    import_hex.add_argument("hexfile", help="Text file holding space separated hex bytes")
    import_hex.add_argument("file", help="Original save file (.dat)")
    import_hex.add_argument("-o", "--output", help="Output path (default: <name>_modified.dat)")

    return parser


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command line arguments. A bare file name opens the editor."""

    argv = list(sys.argv[1:] if argv is None else argv)
    if not argv or (argv[0] not in COMMANDS and argv[0] not in ('-h', '--help')):
        argv.insert(0, 'edit')

    return build_parser().parse_args(argv)


def configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr
    )


def load_session(path: str) -> SaveSession:
    session = SaveSession()
    session.load_file(path)
    return session


def cmd_show(args: argparse.Namespace) -> int:
    session = load_session(args.file)
    name_width = max(len(spec.name) for spec in FIELD_REGISTRY)

    for spec in FIELD_REGISTRY:
        value = format_value(spec, session.fields[spec.name])
        default = format_value(spec, spec.default)
        line = f"{spec.name:<{name_width}}  {value:>12}  (default {default})"

        hint = spec.range_hint()
        if hint:
            line += f"  {hint}"

        print(line)

    return 0


def cmd_set(args: argparse.Namespace) -> int:
    session = load_session(args.file)

    for key in args.preset:
        session.apply_preset(key)

    for assignment in args.assignments:
        name, sep, text = assignment.partition('=')
        if not sep:
            raise SaveEditorError(f"Expected name=value, got '{assignment}'")

        session.set_field_text(name.strip(), text)

    for spec in session.out_of_range():
        logger.warning(
            "%s = %s is outside the usual range %s",
            spec.name, format_value(spec, session.fields[spec.name]), spec.range_hint()
        )

    session.apply_changes()
    path = session.save_file(args.output)
    print(f"Wrote {path}")
    return 0


def cmd_hex(args: argparse.Namespace) -> int:
    session = load_session(args.file)
    print(session.hex_data)
    return 0


def cmd_text(args: argparse.Namespace) -> int:
    session = load_session(args.file)
    text = session.surrogate_text()

    if args.no_color or not sys.stdout.isatty():
        sys.stdout.write(text)
    else:
        sys.stdout.write(highlight_text(text))

    return 0


def cmd_import_hex(args: argparse.Namespace) -> int:
    session = load_session(args.file)

    with open(args.hexfile, 'r', encoding='utf-8') as f:
        session.load_hex(f.read())

    path = session.save_file(args.output)
    print(f"Wrote {path}")
    return 0


def main_with_args(stdscr: 'curses.window', session: SaveSession) -> None:
    """Run the interactive editor on an already loaded session."""

    curses.use_default_colors()
    curses.curs_set(0)
    stdscr.timeout(100)

    window_manager = WindowManager(stdscr, session)
    input_handler = InputHandler(window_manager)

    if session.loaded:
        window_manager.status_message = f"Loaded: {session.filename}"

    while True:
        current_height, current_width = stdscr.getmaxyx()
        if (current_height, current_width) != (window_manager.height, window_manager.width):
            window_manager.resize()

        window_manager.refresh_all()

        try:
            ch = stdscr.getch()
            if ch != -1:
                if not input_handler.handle_input(ch):
                    break
        except KeyboardInterrupt:
            break
        except curses.error:
            continue


def cmd_edit(args: argparse.Namespace) -> int:
    session = SaveSession()
    if args.file:
        session.load_file(args.file)

    curses.wrapper(main_with_args, session)
    return 0


HANDLERS = {
    'edit': cmd_edit,
    'show': cmd_show,
    'set': cmd_set,
    'hex': cmd_hex,
    'text': cmd_text,
    'import-hex': cmd_import_hex,
}


def main(argv: Optional[List[str]] = None) -> int:
    """Entry point for the application."""

    args = parse_args(argv)
    configure_logging(args.verbose)

    try:
        return HANDLERS[args.command](args)
    except (SaveEditorError, IOError) as e:
        print(f"Error: {e}", file=sys.stderr)

    return 1


if __name__ == "__main__":
    sys.exit(main())
