"""Extract micro-benchmark results from libtest bench output."""
