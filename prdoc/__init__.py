"""Change-record (prdoc) parsing, aggregation and changelog tooling."""

__version__ = "0.3.0"
