"""
Pydantic schemas for parsed micro-benchmark results.

This is the single source of truth for the result data structures the
parsers produce. Records are immutable once built.

Identity of a benchmark is its qualified name only. Two records with the
same name but different timings describe the same benchmark; use
benchmark_key() and the helpers below wherever records are ordered or
deduplicated.

Copyright 2025 Advanced Micro Devices, Inc.
All rights reserved.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Generic, Iterable, List, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field, model_validator

# Largest value the harness can print for a 64-bit unsigned counter
U64_MAX = 2**64 - 1

# Separator between path segments of a qualified benchmark name
PATH_SEPARATOR = "::"


# =============================================================================
# Common Types
# =============================================================================


class ParseStatus(Enum):
    """Status of a parse operation."""

    SUCCESS = "success"
    FAILED = "failed"
    NO_DATA = "no_data"  # Input was readable but contained no benchmark lines


T = TypeVar('T', bound=BaseModel)


@dataclass
class ParseResult(Generic[T]):
    """
    Generic result container for parsers.

    Contains validated Pydantic models plus any warnings/errors.
    """

    status: ParseStatus
    results: List[T] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)
    metadata: Dict[str, Any] = field(default_factory=dict)

    @property
    def succeeded(self) -> bool:
        return self.status == ParseStatus.SUCCESS

    @property
    def has_results(self) -> bool:
        return len(self.results) > 0


# =============================================================================
# Benchmark Schema
# =============================================================================


def derive_shortname(name: str) -> str:
    """
    Return the display name for a qualified benchmark name.

    The display name is everything after the last '::'. Names without a
    separator (or ending in one) are returned unchanged.
    """
    _, sep, tail = name.rpartition(PATH_SEPARATOR)
    if sep and tail:
        return tail
    return name


class Benchmark(BaseModel):
    """
    One micro-benchmark result, as printed by the libtest bench harness.

    Example source line:
        test mod::bench_foo ... bench:  1,234 ns/iter (+/- 56) = 2,314 MB/s
    """

    model_config = ConfigDict(frozen=True)

    name: str = Field(min_length=1, description="Qualified name, e.g. mod::test_name")
    shortname: str = Field(min_length=1, description="Last path segment of name, e.g. test_name")
    ns: int = Field(ge=0, le=U64_MAX, description="Duration in nanoseconds per iteration")
    variance: int = Field(ge=0, le=U64_MAX, description="Reported variance, in nanoseconds")
    throughput: Optional[int] = Field(default=None, ge=0, le=U64_MAX, description="Throughput in MB/s")

    @model_validator(mode='after')
    def validate_shortname(self) -> 'Benchmark':
        """Ensure shortname is a suffix of name."""
        if not self.name.endswith(self.shortname):
            raise ValueError(f"shortname '{self.shortname}' is not a suffix of name '{self.name}'")
        return self

    @classmethod
    def from_fields(
        cls, name: str, ns: int, variance: int, throughput: Optional[int] = None
    ) -> "Benchmark":
        """Build a record, deriving shortname from name."""
        return cls(
            name=name,
            shortname=derive_shortname(name),
            ns=ns,
            variance=variance,
            throughput=throughput,
        )


# =============================================================================
# Identity helpers
# =============================================================================


def benchmark_key(benchmark: Benchmark) -> str:
    """Identity key of a benchmark: its qualified name, nothing else."""
    return benchmark.name


def same_benchmark(a: Benchmark, b: Benchmark) -> bool:
    """True when both records describe the same benchmark, whatever their timings."""
    return benchmark_key(a) == benchmark_key(b)


def sort_benchmarks(benchmarks: Iterable[Benchmark]) -> List[Benchmark]:
    """Order records lexicographically by name; records sharing a name keep their input order."""
    return sorted(benchmarks, key=benchmark_key)


def unique_benchmarks(benchmarks: Iterable[Benchmark]) -> List[Benchmark]:
    """Drop records whose name was already seen, keeping the first occurrence."""
    seen = set()
    unique = []
    for bench in benchmarks:
        key = benchmark_key(bench)
        if key in seen:
            continue
        seen.add(key)
        unique.append(bench)
    return unique
