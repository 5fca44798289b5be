import sys

from benchparse.parsers import parse_file, parse_lines


class SubcommandPlugin:
    """Base class for CLI subcommand plugins."""

    def get_name(self):
        raise NotImplementedError

    def get_parser(self, subparsers):
        """Register subcommand with argparse subparsers."""
        raise NotImplementedError

    def get_epilog(self):
        """Return examples or help text for this subcommand. Default is empty."""
        return ""

    def get_order(self):
        """Return the display order for this plugin. Lower numbers appear first. Default is 0."""
        return 0

    def run(self, args):
        """Run the subcommand logic."""
        raise NotImplementedError


def add_input_arguments(parser):
    """Register the positional input files shared by all subcommands."""
    parser.add_argument("files", nargs="*", metavar="FILE", help="Bench output files; '-' or none reads stdin")
    parser.add_argument("--encoding", default="utf-8", help="Text encoding of the input files (default: utf-8)")


def load_benchmarks(files, encoding="utf-8"):
    """Parse every input in order and concatenate the results.

    Exits with status 1 when an input cannot be read; a broken stream aborts the whole run.
    """
    benchmarks = []
    for path in files or ["-"]:
        try:
            if path == "-":
                benchmarks.extend(parse_lines(sys.stdin))
            else:
                benchmarks.extend(parse_file(path, encoding=encoding))
        except (OSError, UnicodeDecodeError) as e:
            print(f"Error: cannot read {path}: {e}", file=sys.stderr)
            sys.exit(1)
    return benchmarks
