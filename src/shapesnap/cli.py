"""
Command-line interface for ShapeSnap.

Provides commands for classifying recorded strokes, hit testing a saved
board, and writing a default configuration file.
"""

import argparse
import json
import sys

from shapesnap.config import load_config, save_default_config
from shapesnap.models import Point
from shapesnap.tracer import configure_tracer, get_tracer


def _add_trace_args(parser):
    parser.add_argument(
        "--trace",
        action="store_true",
        help="Enable runtime tracing",
    )
    parser.add_argument(
        "--trace-level",
        default="INFO",
        choices=["ERROR", "WARN", "INFO", "DEBUG"],
        help="Trace log level",
    )
    parser.add_argument(
        "--trace-file",
        default=None,
        help="Path to write trace logs",
    )
    parser.add_argument(
        "--trace-json",
        action="store_true",
        help="Enable JSON trace output",
    )


def build_parser():
    parser = argparse.ArgumentParser(
        prog="shapesnap",
        description="ShapeSnap: recognize freehand strokes as lines, triangles, rectangles and circles",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Classify command
    classify_parser = subparsers.add_parser("classify", help="Classify strokes from a JSON file")
    classify_parser.add_argument(
        "--strokes", "-s",
        required=True,
        help="JSON file of strokes",
    )
    classify_parser.add_argument(
        "--out", "-o",
        required=True,
        help="Output directory",
    )
    classify_parser.add_argument(
        "--config", "-c",
        default=None,
        help="Path to YAML configuration file",
    )
    classify_parser.add_argument(
        "--debug",
        action="store_true",
        help="Write per-stroke debug overlays",
    )
    _add_trace_args(classify_parser)

    # Hit-test command
    hit_parser = subparsers.add_parser("hit-test", help="List board elements hit by a point")
    hit_parser.add_argument(
        "--board", "-b",
        required=True,
        help="Path to board.json",
    )
    hit_parser.add_argument("--x", type=float, required=True, help="Query x")
    hit_parser.add_argument("--y", type=float, required=True, help="Query y")
    hit_parser.add_argument(
        "--threshold", "-t",
        type=float,
        default=None,
        help="Proximity threshold for paths and lines",
    )
    hit_parser.add_argument(
        "--config", "-c",
        default=None,
        help="Path to YAML configuration file",
    )
    _add_trace_args(hit_parser)

    # Init config command
    init_parser = subparsers.add_parser("init-config", help="Create default config file")
    init_parser.add_argument(
        "--out", "-o",
        default="shapesnap_config.yaml",
        help="Output path for config file",
    )

    return parser


def main(argv=None):
    """Main entry point for the CLI."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 0

    if args.command == "classify":
        return handle_classify(args)
    elif args.command == "hit-test":
        return handle_hit_test(args)
    elif args.command == "init-config":
        return handle_init_config(args)

    return 0


def _configure_tracing(args):
    configure_tracer(
        enabled=args.trace,
        level=args.trace_level,
        file_path=args.trace_file,
        json_output=args.trace_json,
    )


def handle_classify(args):
    """Handle the classify command."""
    _configure_tracing(args)
    tracer = get_tracer()

    try:
        from shapesnap.pipeline import run_recognition

        config = load_config(args.config)
        if args.debug:
            config.debug.enabled = True

        with tracer.span("cli_classify", module="cli"):
            elements, reports = run_recognition(args.strokes, args.out, config=config)

        print(f"\nClassified {len(reports)} strokes.")
        counts = {}
        for report in reports:
            counts[report["kind"]] = counts.get(report["kind"], 0) + 1
        for kind in sorted(counts):
            print(f"  {kind}: {counts[kind]}")
        print(f"\nOutputs saved to: {args.out}/")
        print(f"  - board.json")
        print(f"  - verdicts.json")
        return 0

    except (OSError, ValueError) as e:
        tracer.event(f"Classification failed: {str(e)}", level="ERROR")
        print(f"\nError: {str(e)}", file=sys.stderr)
        return 1


def handle_hit_test(args):
    """Handle the hit-test command."""
    _configure_tracing(args)
    tracer = get_tracer()

    try:
        from shapesnap.board.hit_test import elements_at
        from shapesnap.io.strokes_io import load_board

        config = load_config(args.config)
        elements = load_board(args.board)
        hits = elements_at(elements, Point(x=args.x, y=args.y), args.threshold, config.hit_test)

    except (OSError, ValueError) as e:
        tracer.event(f"Hit test failed: {str(e)}", level="ERROR")
        print(f"\nError: {str(e)}", file=sys.stderr)
        return 1

    print(json.dumps([{"element_id": el.element_id, "kind": el.kind} for el in hits], indent=2))
    return 0


def handle_init_config(args):
    """Handle the init-config command."""
    save_default_config(args.out)
    print(f"Default configuration saved to: {args.out}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
