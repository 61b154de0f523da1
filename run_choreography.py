#!/usr/bin/env python3
# run_choreography.py
# This file is part of Regrada - A DCR Choreography Toolkit
#
# Command-line interface for generating, simulating and round-tripping choreographies

import sys
import json
import argparse
from pathlib import Path
from typing import List, Optional

from core.editor import ChoreographyEditor
from model.choreography import Choreography
from model.sample import build_sample_choreography
from parser.exceptions import ParseError
from utils.logger import configure_logging, get_logger
from utils.model_io import ModelFormatError, dump_document, read_document, write_document


def write_text(text: str, output: Optional[Path]) -> None:
    """Write text to a file, or to stdout when no path is given."""
    if output is None:
        print(text)
        return
    with open(output, "w", encoding="utf-8") as f:
        f.write(text + "\n")
    get_logger().info(f"Wrote {output}")


def format_marking_table(run: Choreography) -> str:
    """Render the run marking of every event as a fixed-width table."""
    header = f"{'event':<8}{'label':<16}{'incl':<6}{'pend':<6}{'exec':<6}{'done':<6}"
    rows = [header, "-" * len(header)]
    for event in run.events.values():
        m = event.marking
        rows.append(
            f"{event.id:<8}{event.label:<16}"
            f"{'x' if m.included else '':<6}{'x' if m.pending else '':<6}"
            f"{'x' if m.executable else '':<6}{'x' if m.executed else '':<6}"
        )
    return "\n".join(rows)


def cmd_generate(args) -> int:
    editor = ChoreographyEditor(read_document(str(args.document)))
    write_text(editor.generate().text, args.output)
    return 0


def cmd_simulate(args) -> int:
    logger = get_logger()
    editor = ChoreographyEditor(read_document(str(args.document)))
    run = editor.start_simulation()
    print(format_marking_table(run))

    for event_id in args.events:
        print()
        if event_id not in run.events:
            logger.error(f"Unknown event: {event_id}")
            editor.stop_simulation()
            return 1
        if editor.fire(event_id):
            print(f"fired {event_id}")
        else:
            logger.warning(f"{event_id} is not executable")
        print(format_marking_table(run))

    editor.stop_simulation()
    return 0


def cmd_summary(args) -> int:
    editor = ChoreographyEditor(read_document(str(args.document)))
    summary = editor.summary()
    print(f"Events: {summary.events_count}")
    print(f"Roles: {', '.join(summary.roles)}")
    return 0


def cmd_sample(args) -> int:
    chor = build_sample_choreography()
    if args.output is None:
        print(json.dumps(dump_document(chor), indent=2))
    else:
        write_document(chor, str(args.output))
        get_logger().info(f"Wrote {args.output}")
    return 0


def cmd_rehydrate(args) -> int:
    logger = get_logger()
    editor = ChoreographyEditor(read_document(str(args.document)))
    editor.generate()

    with open(args.code, "r", encoding="utf-8") as f:
        text = f.read()

    updated = editor.apply_rehydrated(editor.rehydrate(text))
    logger.info(f"Updated events: {', '.join(updated) or 'none'}")

    output = args.output or args.document
    write_document(editor.choreography, str(output))
    logger.info(f"Wrote {output}")
    return 0


def create_argument_parser() -> argparse.ArgumentParser:
    """Create and configure argument parser for command line interface.

    Returns:
        Configured ArgumentParser instance
    """
    parser = argparse.ArgumentParser(
        description="Regrada DCR Choreography Toolkit",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python run_choreography.py sample -o sample.json
  python run_choreography.py generate sample.json
  python run_choreography.py simulate sample.json e0 e1
  python run_choreography.py summary sample.json
  python run_choreography.py rehydrate sample.json edited.chor -o updated.json
        """,
    )

    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Enable verbose output"
    )

    parser.add_argument(
        "--debug", action="store_true", help="Enable debug output (overrides --verbose)"
    )

    commands = parser.add_subparsers(dest="command", required=True)

    generate = commands.add_parser("generate", help="Print the generated code of a document")
    generate.add_argument("document", type=Path, help="Path to JSON choreography document")
    generate.add_argument("-o", "--output", type=Path, help="Write the code to this file")
    generate.set_defaults(handler=cmd_generate)

    simulate = commands.add_parser("simulate", help="Fire events and print the run marking")
    simulate.add_argument("document", type=Path, help="Path to JSON choreography document")
    simulate.add_argument("events", nargs="*", help="Event ids to fire, in order")
    simulate.set_defaults(handler=cmd_simulate)

    summary = commands.add_parser("summary", help="Print event count and role names")
    summary.add_argument("document", type=Path, help="Path to JSON choreography document")
    summary.set_defaults(handler=cmd_summary)

    sample = commands.add_parser("sample", help="Write the sample choreography document")
    sample.add_argument("-o", "--output", type=Path, help="Write the document to this file")
    sample.set_defaults(handler=cmd_sample)

    rehydrate = commands.add_parser("rehydrate", help="Apply edited event lines to a document")
    rehydrate.add_argument("document", type=Path, help="Path to JSON choreography document")
    rehydrate.add_argument("code", type=Path, help="Path to the edited generated code")
    rehydrate.add_argument(
        "-o", "--output", type=Path, help="Write the updated document here instead of in place"
    )
    rehydrate.set_defaults(handler=cmd_rehydrate)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the choreography toolkit.

    Returns:
        Exit code (0 for success, non-zero for errors)
    """
    parser = create_argument_parser()
    args = parser.parse_args(argv)

    configure_logging(verbose=args.verbose, debug=args.debug)
    logger = get_logger()

    try:
        return args.handler(args)

    except ModelFormatError as e:
        logger.error(f"Document error: {e}")
        return 1

    except ParseError as e:
        logger.error(f"Code parsing error: {e}")
        return 2

    except OSError as e:
        logger.error(f"File error: {e}")
        return 3

    except KeyboardInterrupt:
        logger.error("Interrupted by user")
        return 4

    except Exception as e:
        logger.error(f"Unexpected error: {e}")
        import traceback

        traceback.print_exc()
        return 5


if __name__ == "__main__":
    sys.exit(main())
