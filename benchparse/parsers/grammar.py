"""
Line grammar for libtest bench output.

Recognizes a single result line such as:

    test fastfield::bench::bench_fflookup ... bench:   1,330,510 ns/iter (+/- 217,966)
    test io::bench_read                   ... bench:       4,321 ns/iter (+/- 12) = 2,314 MB/s

The match is searched anywhere in the line, so prefixes and suffixes
around the result (timestamps, colour codes, trailing text) are tolerated.

Copyright 2025 Advanced Micro Devices, Inc.
All rights reserved.
"""

import re
from typing import Optional

# Compiled once at import; read-only afterwards and safe to share between threads.
BENCH_RE = re.compile(
    r"""
    test\s+(?P<name>\S+)                            # test   mod::test_name
    \s+\.\.\.\s+bench:\s+(?P<ns>[0-9,]+)\s+ns/iter  # ... bench: 1,234 ns/iter
    \s+\(\+/-\s+(?P<variance>[0-9,]+)\)             # (+/- 4,321)
    (?:\s+=\s+(?P<throughput>[0-9,]+)\s+MB/s)?      # = 2,314 MB/s
    """,
    re.VERBOSE,
)

GROUPS = ("name", "ns", "variance", "throughput")


def match_line(line: str) -> Optional[re.Match]:
    """
    Locate a bench result within a line.

    Args:
        line: One line of harness output, with or without its terminator

    Returns:
        The match, exposing groups name, ns, variance and throughput
        (throughput is None when the '= N MB/s' clause is absent), or None
        when the line is not a bench result.
    """
    return BENCH_RE.search(line)
