"""Data models for the corpus table pipeline."""

from dataclasses import dataclass, field
from pathlib import Path
from typing import NamedTuple, Optional


class WLPT(NamedTuple):
    """A normalized (word, lemma, pos, tag) vocabulary key."""

    word: str
    lemma: str
    pos: str
    tag: str


@dataclass
class TokenRecord:
    """One token line of the raw corpus, before normalization."""

    word: str
    punctuation: str
    lemma: str
    pos: str
    tag: str


@dataclass
class WLPTEntry:
    """A row of the WLPT character table."""

    id: int
    key: WLPT
    incidence: int

    def to_dict(self) -> dict:
        """Convert to dictionary for output."""
        return {
            "id": self.id,
            "word": self.key.word,
            "lemma": self.key.lemma,
            "pos": self.key.pos,
            "tag": self.key.tag,
            "incidence": self.incidence,
        }


@dataclass
class DimensionEntry:
    """A distinct word, lemma, POS or tag value with its total incidence."""

    id: int
    value: str
    incidence: int


@dataclass
class FactRow:
    """A WLPT fact row referencing the four dimension dictionaries."""

    id: int
    word_id: int
    lemma_id: int
    pos_id: int
    tag_id: int
    incidence: int


@dataclass
class DictionarySet:
    """Output of the dictionary builder."""

    words: list[DimensionEntry] = field(default_factory=list)
    lemmas: list[DimensionEntry] = field(default_factory=list)
    pos: list[DimensionEntry] = field(default_factory=list)
    tags: list[DimensionEntry] = field(default_factory=list)
    facts: list[FactRow] = field(default_factory=list)


@dataclass
class WPISRow:
    """Word-position-in-sentence row."""

    sentence_id: str
    position: int
    wlpt_id: int


@dataclass
class FileResult:
    """Summary returned by a per-file worker."""

    source: Path
    fragment: Optional[Path]
    rows: int
    tokens: int = 0


@dataclass
class StageResult:
    """Outcome of one pipeline stage."""

    stage: str
    status: str  # "completed" or "skipped"
    rows: int = 0
    elapsed: float = 0.0
