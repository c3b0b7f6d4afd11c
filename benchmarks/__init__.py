"""
Benchmark suite for jtree parsing, serialization and tree operations.

Compares jtree against the standard library json module, orjson and ujson,
and measures the peak memory of building a value tree.
"""
