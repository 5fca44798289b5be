"""
Parsers module: raw bench output to validated records.

Parsers are responsible for:
- Recognizing bench result lines amid unrelated harness output
- Normalizing numeric fields (thousands separators, 64-bit range)
- Producing immutable Pydantic records in input order

Parsers should NOT:
- Run benchmarks
- Compare, aggregate or render results
"""

from benchparse.parsers.schemas import (
    # Result schemas
    Benchmark,
    ParseResult,
    ParseStatus,
    # Identity helpers
    benchmark_key,
    derive_shortname,
    same_benchmark,
    sort_benchmarks,
    unique_benchmarks,
)
from benchparse.parsers.grammar import BENCH_RE, match_line

# Parser implementations
from benchparse.parsers.libtest import (
    LibtestOutputParser,
    parse_all,
    parse_file,
    parse_line,
    parse_lines,
    parse_number,
)

__all__ = [
    # Result schemas
    "Benchmark",
    "ParseResult",
    "ParseStatus",
    # Identity helpers
    "benchmark_key",
    "derive_shortname",
    "same_benchmark",
    "sort_benchmarks",
    "unique_benchmarks",
    # Grammar
    "BENCH_RE",
    "match_line",
    # Parser implementations
    "LibtestOutputParser",
    "parse_all",
    "parse_file",
    "parse_line",
    "parse_lines",
    "parse_number",
]
