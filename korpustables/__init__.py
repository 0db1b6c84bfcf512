"""korpustables - Dictionary-encoded relational tables from a tagged corpus."""

__version__ = "0.1.0"

from .config import Config
from .errors import (
    ConfigurationError,
    CorpusFormatError,
    DictionaryMismatchError,
    KorpusTablesError,
    MissingPrerequisiteError,
    TableConsistencyError,
)
from .pipeline import CorpusPipeline
from .validation import validate_outputs

__all__ = [
    "Config",
    "CorpusPipeline",
    "validate_outputs",
    "KorpusTablesError",
    "ConfigurationError",
    "CorpusFormatError",
    "DictionaryMismatchError",
    "MissingPrerequisiteError",
    "TableConsistencyError",
]
