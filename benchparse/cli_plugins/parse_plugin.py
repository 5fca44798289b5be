import json
import logging
import sys

from .base import SubcommandPlugin, add_input_arguments, load_benchmarks
from benchparse.parsers import sort_benchmarks, unique_benchmarks

log = logging.getLogger(__name__)


class ParsePlugin(SubcommandPlugin):
    def get_name(self):
        return "parse"

    def get_parser(self, subparsers):
        parser = subparsers.add_parser("parse", help="Extract bench results as JSON")
        add_input_arguments(parser)
        parser.add_argument("--sort", action="store_true", help="Order results by benchmark name")
        parser.add_argument("--unique", action="store_true", help="Keep only the first result for each name")
        parser.add_argument("-o", "--output", help="Write JSON to this file instead of stdout")
        parser.add_argument("--indent", type=int, default=2, help="JSON indentation (default: 2)")
        parser.set_defaults(_plugin=self)
        return parser

    def get_epilog(self):
        return """
Parse Commands:
  benchparse parse bench.txt                   Print results as JSON
  cargo bench | benchparse parse               Read bench output from stdin
  benchparse parse a.txt b.txt --sort --unique One result per name, ordered by name"""

    @staticmethod
    def select(benchmarks, sort=False, unique=False):
        """Apply the name-based dedup and ordering requested on the command line."""
        if unique:
            benchmarks = unique_benchmarks(benchmarks)
        if sort:
            benchmarks = sort_benchmarks(benchmarks)
        return benchmarks

    def run(self, args):
        benchmarks = load_benchmarks(args.files, encoding=args.encoding)
        benchmarks = self.select(benchmarks, sort=args.sort, unique=args.unique)
        payload = json.dumps([bench.model_dump() for bench in benchmarks], indent=args.indent)

        if args.output:
            try:
                with open(args.output, "w") as f:
                    f.write(payload + "\n")
            except OSError as e:
                print(f"Error: cannot write {args.output}: {e}", file=sys.stderr)
                sys.exit(1)
            log.info(f"Wrote {len(benchmarks)} benchmarks to {args.output}")
        else:
            print(payload)
