import io
import os
import tempfile
import unittest

from benchparse.parsers.libtest import (
    LibtestOutputParser,
    parse_all,
    parse_file,
    parse_line,
    parse_lines,
    parse_number,
)
from benchparse.parsers.schemas import U64_MAX, ParseStatus


TEST_DATA = """running 3 tests
test fastfield::multivalued::bench::bench_multi_value_ff_creation                                                        ... bench:  95,653,541 ns/iter (+/- 1,410,738)
test fastfield::multivalued::bench::bench_multi_value_ff_creation_with_sorting                                           ... bench: 103,466,980 ns/iter (+/- 6,247,651)
test fastfield::multivalued::bench::bench_multi_value_fflookup                                                           ... bench:   1,330,510 ns/iter (+/- 217,966)
"""


class TestParseNumber(unittest.TestCase):
    def test_strips_thousands_separators(self):
        self.assertEqual(parse_number("95,653,541"), 95653541)
        self.assertEqual(parse_number("1,330,510"), 1330510)
        self.assertEqual(parse_number("42"), 42)

    def test_comma_placement_not_validated(self):
        """Test commas are dropped wherever they appear"""
        self.assertEqual(parse_number("12,34"), 1234)
        self.assertEqual(parse_number(",1,,2,"), 12)

    def test_only_commas_rejected(self):
        self.assertIsNone(parse_number(",,,"))
        self.assertIsNone(parse_number(""))

    def test_u64_range(self):
        """Test values up to 2**64-1 parse and larger ones are rejected"""
        self.assertEqual(parse_number(str(U64_MAX)), U64_MAX)
        self.assertEqual(parse_number("18,446,744,073,709,551,615"), U64_MAX)
        self.assertIsNone(parse_number(str(U64_MAX + 1)))
        self.assertEqual(parse_number("4,294,967,296"), 2**32)

    def test_non_digits_rejected(self):
        self.assertIsNone(parse_number("12a"))
        self.assertIsNone(parse_number("-5"))
        self.assertIsNone(parse_number("١٢"))


class TestParseLine(unittest.TestCase):
    def test_parses_result_line(self):
        bench = parse_line(
            "test fastfield::multivalued::bench::bench_multi_value_ff_creation   ... bench:  95,653,541 ns/iter (+/- 1,410,738)"
        )
        self.assertIsNotNone(bench)
        self.assertEqual(bench.name, "fastfield::multivalued::bench::bench_multi_value_ff_creation")
        self.assertEqual(bench.shortname, "bench_multi_value_ff_creation")
        self.assertEqual(bench.ns, 95653541)
        self.assertEqual(bench.variance, 1410738)
        self.assertIsNone(bench.throughput)

    def test_parses_throughput(self):
        bench = parse_line("test io::bench_read ... bench:       4,321 ns/iter (+/- 12) = 2,314 MB/s")
        self.assertIsNotNone(bench)
        self.assertEqual(bench.throughput, 2314)
        self.assertEqual(bench.ns, 4321)
        self.assertEqual(bench.variance, 12)

    def test_name_without_separator(self):
        """Test shortname equals name when there is no '::'"""
        bench = parse_line("test bench_alone ... bench: 10 ns/iter (+/- 1)")
        self.assertEqual(bench.name, "bench_alone")
        self.assertEqual(bench.shortname, "bench_alone")

    def test_non_matching_lines_return_none(self):
        for line in ["", "running 3 tests", "some prose about benchmarks", "test a::b ... 10 ns/iter (+/- 1)"]:
            with self.subTest(line=line):
                self.assertIsNone(parse_line(line))

    def test_ns_overflow_drops_line(self):
        self.assertIsNone(parse_line(f"test a ... bench: {U64_MAX + 1} ns/iter (+/- 1)"))

    def test_variance_overflow_drops_line(self):
        self.assertIsNone(parse_line(f"test a ... bench: 1 ns/iter (+/- {U64_MAX + 1})"))

    def test_comma_only_ns_drops_line(self):
        self.assertIsNone(parse_line("test a ... bench: ,,, ns/iter (+/- 1)"))

    def test_throughput_overflow_drops_field_only(self):
        bench = parse_line(f"test a::b ... bench: 5 ns/iter (+/- 1) = {U64_MAX + 1} MB/s")
        self.assertIsNotNone(bench)
        self.assertEqual(bench.ns, 5)
        self.assertIsNone(bench.throughput)

    def test_line_terminator_ignored(self):
        bench = parse_line("test a::b ... bench: 5 ns/iter (+/- 1)\r\n")
        self.assertEqual(bench.name, "a::b")
        self.assertEqual(bench.variance, 1)


class TestBatchParsing(unittest.TestCase):
    def test_end_to_end(self):
        benchmarks = parse_lines(io.StringIO(TEST_DATA))

        shortnames = [bench.shortname for bench in benchmarks]
        self.assertEqual(
            shortnames,
            [
                "bench_multi_value_ff_creation",
                "bench_multi_value_ff_creation_with_sorting",
                "bench_multi_value_fflookup",
            ],
        )
        self.assertEqual([bench.ns for bench in benchmarks], [95653541, 103466980, 1330510])
        self.assertTrue(all(bench.throughput is None for bench in benchmarks))

    def test_order_preserved_and_noise_skipped(self):
        lines = [
            "test z ... bench: 3 ns/iter (+/- 0)",
            "noise",
            "test a ... bench: 1 ns/iter (+/- 0)",
            "",
            "test m ... bench: 2 ns/iter (+/- 0)",
        ]
        self.assertEqual([b.name for b in parse_all(lines)], ["z", "a", "m"])

    def test_duplicates_kept(self):
        lines = [
            "test a ... bench: 1 ns/iter (+/- 0)",
            "test a ... bench: 2 ns/iter (+/- 0)",
        ]
        benchmarks = parse_all(lines)
        self.assertEqual([b.ns for b in benchmarks], [1, 2])

    def test_empty_input(self):
        self.assertEqual(parse_all([]), [])

    def test_stream_error_aborts_batch(self):
        """Test errors raised by the stream propagate instead of being skipped"""

        def broken_stream():
            yield "test a ... bench: 1 ns/iter (+/- 0)\n"
            raise OSError("read failed")

        with self.assertRaises(OSError):
            parse_lines(broken_stream())


class TestFileParsing(unittest.TestCase):
    def setUp(self):
        self.tmpdir = tempfile.TemporaryDirectory()
        self.addCleanup(self.tmpdir.cleanup)

    def _write(self, name, content):
        path = os.path.join(self.tmpdir.name, name)
        with open(path, "w", encoding="utf-8") as f:
            f.write(content)
        return path

    def test_parse_file(self):
        path = self._write("bench.txt", TEST_DATA)
        self.assertEqual(len(parse_file(path)), 3)

    def test_parse_file_missing(self):
        with self.assertRaises(FileNotFoundError):
            parse_file(os.path.join(self.tmpdir.name, "missing.txt"))

    def test_output_parser_success(self):
        path = self._write("bench.txt", TEST_DATA)
        result = LibtestOutputParser(path).parse()
        self.assertTrue(result.succeeded)
        self.assertTrue(result.has_results)
        self.assertEqual(len(result.results), 3)
        self.assertEqual(result.metadata["lines_read"], 4)
        self.assertEqual(result.metadata["benchmarks"], 3)
        self.assertEqual(result.metadata["source"], path)

    def test_output_parser_no_data(self):
        path = self._write("empty.txt", "running 0 tests\n\ntest result: ok.\n")
        result = LibtestOutputParser(path).parse()
        self.assertEqual(result.status, ParseStatus.NO_DATA)
        self.assertFalse(result.has_results)
        self.assertEqual(len(result.warnings), 1)
        self.assertEqual(result.metadata["lines_read"], 3)

    def test_output_parser_unreadable(self):
        result = LibtestOutputParser(os.path.join(self.tmpdir.name, "missing.txt")).parse()
        self.assertEqual(result.status, ParseStatus.FAILED)
        self.assertEqual(len(result.errors), 1)
        self.assertEqual(result.results, [])

    def test_output_parser_bad_encoding(self):
        path = os.path.join(self.tmpdir.name, "latin1.txt")
        with open(path, "wb") as f:
            f.write(b"test caf\xe9 ... bench: 1 ns/iter (+/- 0)\n")
        result = LibtestOutputParser(path).parse()
        self.assertEqual(result.status, ParseStatus.FAILED)

        result = LibtestOutputParser(path, encoding="latin-1").parse()
        self.assertTrue(result.succeeded)
        self.assertEqual(result.results[0].name, "caf\xe9")


if __name__ == "__main__":
    unittest.main()
