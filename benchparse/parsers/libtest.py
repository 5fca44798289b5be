"""
libtest bench output parser.

Turns the text printed by `cargo bench` (libtest's bench harness) into
Benchmark records. Lines that are not bench results are skipped silently;
only failures reading the underlying stream are raised.

Copyright 2025 Advanced Micro Devices, Inc.
All rights reserved.
"""

import logging
from pathlib import Path
from typing import Iterable, List, Optional, Union

from pydantic import ValidationError

from benchparse.parsers.grammar import match_line
from benchparse.parsers.schemas import U64_MAX, Benchmark, ParseResult, ParseStatus

log = logging.getLogger(__name__)


def parse_number(text: str) -> Optional[int]:
    """
    Drop all commas from a numeric capture and parse it as an unsigned 64-bit integer.

    Comma placement is not validated: "1,234", "12,34" and "1234," all give 1234.

    Returns:
        The value, or None when nothing but commas remains, a non-digit is
        present, or the value does not fit in 64 bits.
    """
    digits = text.replace(",", "")
    if not digits or not (digits.isascii() and digits.isdigit()):
        return None
    value = int(digits)
    if value > U64_MAX:
        return None
    return value


def parse_line(line: str) -> Optional[Benchmark]:
    """
    Parse a single line of bench output.

    Args:
        line: One line of harness output

    Returns:
        Benchmark if the line is a bench result with usable ns and variance,
        None otherwise. An unusable throughput only drops that field.
    """
    m = match_line(line)
    if m is None:
        return None

    name = m.group("name")

    ns = parse_number(m.group("ns"))
    if ns is None:
        log.debug(f"{name}: unusable ns/iter value '{m.group('ns')}', skipping line")
        return None

    variance = parse_number(m.group("variance"))
    if variance is None:
        log.debug(f"{name}: unusable variance value '{m.group('variance')}', skipping line")
        return None

    throughput = None
    raw_throughput = m.group("throughput")
    if raw_throughput is not None:
        throughput = parse_number(raw_throughput)
        if throughput is None:
            log.debug(f"{name}: unusable throughput value '{raw_throughput}', dropping field")

    try:
        return Benchmark.from_fields(name, ns, variance, throughput)
    except ValidationError as e:
        log.debug(f"{name}: rejected by schema - {e}")
        return None


def parse_all(lines: Iterable[str]) -> List[Benchmark]:
    """
    Parse every line, keeping bench results in input order.

    Duplicate names are kept; see schemas.unique_benchmarks() for dedup.
    """
    benchmarks = []
    for line in lines:
        bench = parse_line(line.rstrip("\r\n"))
        if bench is not None:
            benchmarks.append(bench)
    return benchmarks


def parse_lines(stream: Iterable[str]) -> List[Benchmark]:
    """
    Parse benchmarks from a text stream (file object, StringIO, stdin).

    Errors raised while reading the stream (OSError, UnicodeDecodeError)
    propagate and abort the whole batch.
    """
    return parse_all(stream)


def parse_file(path: Union[str, Path], encoding: str = "utf-8") -> List[Benchmark]:
    """Open a bench output file and parse it. OSError propagates."""
    with open(path, "r", encoding=encoding) as f:
        return parse_lines(f)


class LibtestOutputParser:
    """
    Parser for a saved `cargo bench` output file.

    Handles:
    - Reading the file line by line
    - Extracting Benchmark records in input order
    - Reporting read failures and empty outputs through ParseResult
    """

    def __init__(self, output_file: Union[str, Path], encoding: str = "utf-8"):
        """
        Initialize parser.

        Args:
            output_file: Path to the captured bench output
            encoding: Text encoding of the file (default: utf-8)
        """
        self.output_file = Path(output_file)
        self.encoding = encoding

    def parse(self) -> ParseResult[Benchmark]:
        """
        Parse the output file.

        Returns:
            ParseResult with status SUCCESS when at least one benchmark was
            found, NO_DATA when the file holds none, FAILED when it could
            not be read.
        """
        metadata = {"source": str(self.output_file), "lines_read": 0, "benchmarks": 0}

        lines_read = 0
        benchmarks = []
        try:
            with open(self.output_file, "r", encoding=self.encoding) as f:
                for line in f:
                    lines_read += 1
                    bench = parse_line(line.rstrip("\r\n"))
                    if bench is not None:
                        benchmarks.append(bench)
        except (OSError, UnicodeDecodeError) as e:
            log.error(f"Failed to read {self.output_file}: {e}")
            metadata["lines_read"] = lines_read
            return ParseResult(
                status=ParseStatus.FAILED,
                errors=[f"{self.output_file}: {e}"],
                metadata=metadata,
            )

        metadata["lines_read"] = lines_read
        metadata["benchmarks"] = len(benchmarks)

        if not benchmarks:
            log.warning(f"No bench results found in {self.output_file} ({lines_read} lines)")
            return ParseResult(
                status=ParseStatus.NO_DATA,
                warnings=[f"No bench results found in {self.output_file}"],
                metadata=metadata,
            )

        log.info(f"Parsed {len(benchmarks)} benchmarks from {self.output_file} ({lines_read} lines)")
        return ParseResult(status=ParseStatus.SUCCESS, results=benchmarks, metadata=metadata)
