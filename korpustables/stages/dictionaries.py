"""Decomposition of the WLPT table into dimension dictionaries and a fact table."""

import logging
from pathlib import Path
from typing import Iterable

from ..data.tables import write_table
from ..models import DictionarySet, DimensionEntry, FactRow, WLPTEntry
from ..registry import KeyRegistry
from .base import PipelineStage
from .merger import read_wlpt_chars

logger = logging.getLogger(__name__)

# Dimension table key -> value column name
DIMENSIONS = {
    "words": "word",
    "lemmas": "lemma",
    "pos": "pos",
    "tags": "tag",
}


def build_dictionaries(entries: Iterable[WLPTEntry]) -> DictionarySet:
    """
    Split WLPT entries into four dimension dictionaries and a fact table.

    Entries are walked once in the given order. Each field gets its own
    ID space starting at 1, assigned in first-seen order, and each
    dimension entry accumulates the incidence of every tuple using it.

    Args:
        entries: WLPT entries, normally in ascending ID order

    Returns:
        DictionarySet with words, lemmas, pos, tags and facts
    """
    registries: dict[str, KeyRegistry[str]] = {table: KeyRegistry() for table in DIMENSIONS}
    facts = []

    for entry in entries:
        facts.append(
            FactRow(
                id=entry.id,
                word_id=registries["words"].add(entry.key.word, entry.incidence),
                lemma_id=registries["lemmas"].add(entry.key.lemma, entry.incidence),
                pos_id=registries["pos"].add(entry.key.pos, entry.incidence),
                tag_id=registries["tags"].add(entry.key.tag, entry.incidence),
                incidence=entry.incidence,
            )
        )

    dimensions = {
        table: [DimensionEntry(id=i, value=value, incidence=n) for i, value, n in registry]
        for table, registry in registries.items()
    }
    return DictionarySet(facts=facts, **dimensions)


def write_dimension(path: Path, table: str, entries: list[DimensionEntry]) -> int:
    """Write one dimension dictionary with its table-specific value column."""
    value_column = DIMENSIONS[table]
    data = {
        "id": [entry.id for entry in entries],
        value_column: [entry.value for entry in entries],
        "incidence": [entry.incidence for entry in entries],
    }
    return write_table(path, data, table)


def write_facts(path: Path, facts: list[FactRow]) -> int:
    """Write the WLPT fact table."""
    data = {
        "id": [row.id for row in facts],
        "word_id": [row.word_id for row in facts],
        "lemma_id": [row.lemma_id for row in facts],
        "pos_id": [row.pos_id for row in facts],
        "tag_id": [row.tag_id for row in facts],
        "incidence": [row.incidence for row in facts],
    }
    return write_table(path, data, "wlpt")


class DictionaryStage(PipelineStage):
    """Builds the word, lemma, POS and tag dictionaries and the fact table."""

    name = "dictionaries"
    requires = ("wlpt_chars",)
    produces = ("words", "lemmas", "pos", "tags", "wlpt")

    def run(self) -> int:
        entries = read_wlpt_chars(self.context.path("wlpt_chars"))
        dictionaries = build_dictionaries(entries)

        for table in DIMENSIONS:
            rows = write_dimension(self.context.path(table), table, getattr(dictionaries, table))
            logger.info(f"Wrote {rows} {table}")

        return write_facts(self.context.path("wlpt"), dictionaries.facts)
