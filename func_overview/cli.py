import argparse
import logging
import os
import sys

from . import report
from .lexer import MalformedLine
from .pipeline import parse_trace
from .stats import SORT_KEYS
from .tracer import DEFAULT_TRACING_DIR, Tracer, TracerError

EXIT_USAGE = 1
EXIT_TRACER = 2
EXIT_MALFORMED = 3


def get_parser():
    parser = argparse.ArgumentParser(
        prog="func-overview",
        description="Per-function timing overview of a function_graph trace.\n\n"
        "If no filename is specified, a trace is recorded for --duration seconds\n"
        "(this needs root).",
        formatter_class=argparse.RawTextHelpFormatter,
    )
    parser.add_argument("filename", nargs="?", help="function_graph trace file to parse")
    parser.add_argument(
        "--duration", type=float, default=10, help="seconds to record when no filename is given"
    )
    parser.add_argument(
        "--tracing-dir",
        help="tracefs directory",
        default=os.getenv("FUNC_OVERVIEW_TRACING_DIR", DEFAULT_TRACING_DIR),
    )
    parser.add_argument("--sort", choices=SORT_KEYS, default="name", help="row ordering")
    parser.add_argument("--top", type=int, default=None, help="only show the first N rows")
    parser.add_argument(
        "--strict", action="store_true", help="abort on the first malformed call record"
    )
    parser.add_argument("--max-cpus", type=int, default=None, help="reject events from CPUs >= N")
    parser.add_argument(
        "--out",
        help="directory to save the CSV report (and plots with --plot)",
        default=os.getenv("FUNC_OVERVIEW_OUTPUT_DIR"),
    )
    parser.add_argument("--plot", action="store_true", help="plot the top functions into --out")
    parser.add_argument("-v", "--verbose", action="store_true", help="debug logging")
    return parser


def main(argv=None):
    parser = get_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if args.plot and not args.out:
        parser.error("--plot needs an output directory (--out)")

    filename = args.filename
    if filename is None:
        if os.geteuid() != 0:
            parser.print_usage(sys.stderr)
            print("Please run as root to perform a trace.", file=sys.stderr)
            return EXIT_USAGE
        try:
            filename = Tracer(args.tracing_dir).record(args.duration)
        except TracerError as e:
            print(f"{e}. Exiting.", file=sys.stderr)
            return EXIT_TRACER

    if not os.path.isfile(filename):
        print(f"Error: File not found at '{filename}'", file=sys.stderr)
        return EXIT_USAGE

    print(f"Parsing '{filename}'...")
    try:
        stats, summary = parse_trace(filename, strict=args.strict, max_cpus=args.max_cpus)
    except MalformedLine as e:
        print(f"Invalid trace: {e}", file=sys.stderr)
        return EXIT_MALFORMED
    except OSError as e:
        print(f"Error reading '{filename}': {e}", file=sys.stderr)
        return EXIT_USAGE

    print(f"Parsing complete. Processed {summary.lines} lines, matched format on {summary.events} lines.")
    if summary.malformed:
        print(f"Ignored {summary.malformed} malformed lines.")
    if summary.unmatched_exits or summary.discarded:
        print(
            f"Dropped {summary.unmatched_exits} exits without entry and "
            f"{summary.discarded} unfinished calls."
        )

    if not len(stats):
        print("No function data parsed. Check the log file format.")
        return EXIT_USAGE

    print("Calculating overview ...\n")
    rows = stats.report(sort=args.sort)
    if args.top is not None:
        rows = rows[: args.top]
    print(report.format_table(rows))

    if args.out:
        df = report.to_dataframe(rows)
        print(f"\nSaved {report.write_csv(df, args.out)}")
        if args.plot:
            for path in report.plot_top_functions(df, args.out, top_n=len(rows)):
                print(f"Saved {path}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
