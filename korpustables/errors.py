"""Exceptions raised by the corpus table pipeline."""


class KorpusTablesError(Exception):
    """Base class for pipeline errors."""


class ConfigurationError(KorpusTablesError):
    """Raised when paths or options make the run impossible before it starts."""


class MissingPrerequisiteError(KorpusTablesError):
    """
    Raised when a stage needs a table that neither exists on disk
    nor is produced by an earlier selected stage.
    """


class CorpusFormatError(KorpusTablesError):
    """Raised when a token line does not carry the six required fields."""


class DictionaryMismatchError(KorpusTablesError):
    """
    Raised when a normalized corpus token has no entry in the WLPT
    dictionary, i.e. the dictionary was built from a different corpus.
    """


class TableConsistencyError(KorpusTablesError):
    """Raised when materialized tables violate referential integrity or conservation."""
