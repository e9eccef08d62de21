# src/treemerge/cli.py
import sys
import argparse
import os
from pathlib import Path

# Module imports
from treemerge.config import (
    DEFAULT_COMMENT,
    DEFAULT_EXTENSIONS,
    DEFAULT_IGNORED_DIRS,
    DEFAULT_IGNORE_REGEXP,
    DEFAULT_OUTPUT,
    CHANNEL_CAPACITY,
    SUMMARY_TOP_N,
)
from treemerge.core.filters import PathFilter
from treemerge.core.ignore import load_ignore_spec
from treemerge.core.pipeline import run_pipeline
from treemerge.errors import ConfigError, SinkError
from treemerge.models import RunReport


def create_arg_parser():
    parser = argparse.ArgumentParser(
        prog="treemerge",
        description="Merge files from one or more directory trees into a single file, each prefixed with its path.",
    )
    parser.add_argument("paths", nargs="*", help="Files or directories to scan")
    parser.add_argument("-e", "--extensions", type=str, default=DEFAULT_EXTENSIONS,
                        help="File extensions to be merged, comma separated")
    parser.add_argument("-o", "--output", type=str, default=DEFAULT_OUTPUT, help="Output file name")
    parser.add_argument("-i", "--ignore", type=str, default=DEFAULT_IGNORED_DIRS,
                        help="Ignore directories with these names, comma separated")
    parser.add_argument("-c", "--comment", type=str, default=DEFAULT_COMMENT,
                        help="Comment symbol used to write the file name")
    parser.add_argument("-r", "--ignore-reg-exp", type=str, default=DEFAULT_IGNORE_REGEXP,
                        help="Skip files whose name matches this regular expression")
    parser.add_argument("--ignore-file", type=Path, default=None,
                        help="Extra gitignore-style rules, matched relative to each root")
    parser.add_argument("--truncate", action="store_true", help="Overwrite the output instead of appending to it")
    parser.add_argument("-w", "--workers", type=int, default=1, help="Roots scanned concurrently (default 1)")
    parser.add_argument("--capacity", type=int, default=CHANNEL_CAPACITY, help=argparse.SUPPRESS)
    parser.add_argument("--no-tokens", action="store_true", help="Skip token estimation")
    parser.add_argument("-q", "--quiet", action="store_true", help="Only print warnings and errors")
    return parser


def print_summary(report: RunReport, show_tokens: bool):
    stats = report.stats
    if show_tokens and stats.files:
        print(f"\n--- Top {SUMMARY_TOP_N} Largest Files (Est. Tokens) ---")
        print(f"{'Rank':<5} | {'Tokens':<10} | {'File Path'}")
        print("-" * 60)
        for i, (path, tokens) in enumerate(stats.largest()):
            print(f"{i+1:<5} | {tokens:<10} | {path}")
        print("-" * 60)
    print(f"Total files: {stats.files}")
    print(f"Total bytes: {stats.bytes_written}")
    if show_tokens:
        print(f"Total tokens: {stats.tokens}")
    if report.failures:
        print(f"Failed roots: {len(report.failures)}")


def main():
    try:
        # 1. Setup
        parser = create_arg_parser()
        args = parser.parse_args()

        if not args.paths:
            print("No paths provided", file=sys.stderr)
            parser.print_usage(sys.stderr)
            sys.exit(1)

        # 2. Filters
        try:
            path_filter = PathFilter.from_strings(args.extensions, args.ignore, args.ignore_reg_exp)
            ignore_spec = load_ignore_spec(args.ignore_file)
        except ConfigError as e:
            print(f"Error: {e}", file=sys.stderr)
            sys.exit(1)

        output_file = Path(args.output)

        if not args.quiet:
            print(f"--- treemerge ---")
            print(f"Scanning: {', '.join(args.paths)}")
            print(f"Output:   {output_file}")
            print(f"Mode:     Extensions {sorted(path_filter.config.extensions)}")

        # 3. Output
        try:
            out = open(output_file, "wb" if args.truncate else "ab")
        except OSError as e:
            print(f"Could not create output file: {e}", file=sys.stderr)
            sys.exit(1)

        # 4. Merge
        with out:
            try:
                report = run_pipeline(
                    args.paths,
                    path_filter,
                    out,
                    comment_symbol=args.comment,
                    capacity=args.capacity,
                    workers=args.workers,
                    ignore_spec=ignore_spec,
                    exclude_paths=[os.fspath(output_file)],
                    count_tokens=not args.no_tokens,
                )
            except (ConfigError, SinkError) as e:
                print(f"Error: {e}", file=sys.stderr)
                sys.exit(1)

        if not args.quiet:
            print_summary(report, show_tokens=not args.no_tokens)
            print(f"\nSuccess! Output written to: {output_file}")

    except KeyboardInterrupt:
        print("\nCancelled.", file=sys.stderr)
        sys.exit(1)

    except Exception as e:
        print(f"An unexpected error occurred: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
