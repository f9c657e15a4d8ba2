"""RMP document parsing and the data model shared across rmp-metro."""

from rmp_metro.parser.rmp import RmpFormatError, load_rmp, parse_rmp_document, rmp_stats

__all__ = ["RmpFormatError", "load_rmp", "parse_rmp_document", "rmp_stats"]
