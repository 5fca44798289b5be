from .base import SubcommandPlugin, add_input_arguments, load_benchmarks


class ListPlugin(SubcommandPlugin):
    def get_name(self):
        return "list"

    def get_order(self):
        return 10

    def get_parser(self, subparsers):
        parser = subparsers.add_parser("list", help="List benchmark names found in bench output")
        add_input_arguments(parser)
        parser.add_argument("--short", action="store_true", help="Print short names (last '::' segment)")
        parser.set_defaults(_plugin=self)
        return parser

    def get_epilog(self):
        return """
List Commands:
  benchparse list bench.txt                    List qualified benchmark names
  benchparse list bench.txt --short            List short names"""

    def list_names(self, benchmarks, short=False):
        for bench in benchmarks:
            print(bench.shortname if short else bench.name)

    def run(self, args):
        self.list_names(load_benchmarks(args.files, encoding=args.encoding), short=args.short)
