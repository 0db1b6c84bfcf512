"""Corpus reading and table I/O modules."""

from .corpus_reader import discover_corpus_files, iter_corpus_lines
from .tables import concat_fragments, read_table, write_table

__all__ = [
    "discover_corpus_files",
    "iter_corpus_lines",
    "concat_fragments",
    "read_table",
    "write_table",
]
