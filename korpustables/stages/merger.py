"""Merging of per-file tuple counts into the global WLPT table."""

import logging
from pathlib import Path
from typing import Iterable, Iterator

from ..data.tables import read_table, write_table
from ..models import WLPT, WLPTEntry
from ..registry import KeyRegistry
from .base import PipelineStage
from .extractor import read_manifest

logger = logging.getLogger(__name__)


def iter_fragment(path: Path) -> Iterator[tuple[WLPT, int]]:
    """Yield ``(WLPT, incidence)`` pairs from a fragment, in file order."""
    df = read_table(path, "fragment")
    for word, lemma, pos, tag, incidence in zip(
        df["word"], df["lemma"], df["pos"], df["tag"], df["incidence"]
    ):
        yield WLPT(word, lemma, pos, tag), int(incidence)


def merge_counts(sources: Iterable[Iterable[tuple[WLPT, int]]]) -> list[WLPTEntry]:
    """
    Merge tuple/incidence streams and assign surrogate IDs.

    Incidences of identical tuples are summed. IDs are assigned in the
    order tuples are first seen while walking ``sources`` in order and
    each source in order.

    Args:
        sources: One iterable of ``(WLPT, incidence)`` per input file

    Returns:
        WLPT entries in ascending ID order (empty for empty input)
    """
    registry: KeyRegistry[WLPT] = KeyRegistry()
    for source in sources:
        for key, incidence in source:
            registry.add(key, incidence)

    logger.info(f"Merged {registry.total} tokens into {len(registry)} distinct WLPT tuples")
    return [WLPTEntry(id=key_id, key=key, incidence=incidence) for key_id, key, incidence in registry]


def write_wlpt_chars(path: Path, entries: list[WLPTEntry]) -> int:
    """Write the WLPT character table."""
    return write_table(path, [entry.to_dict() for entry in entries], "wlpt_chars")


def read_wlpt_chars(path: Path) -> list[WLPTEntry]:
    """Read the WLPT character table in ascending ID order."""
    df = read_table(path, "wlpt_chars").sort_values("id", kind="stable")
    return [
        WLPTEntry(id=int(row_id), key=WLPT(word, lemma, pos, tag), incidence=int(incidence))
        for row_id, word, lemma, pos, tag, incidence in zip(
            df["id"], df["word"], df["lemma"], df["pos"], df["tag"], df["incidence"]
        )
    ]


class MergeStage(PipelineStage):
    """Builds the global WLPT character table from extract fragments."""

    name = "merge"
    requires = ("extract_manifest",)
    produces = ("wlpt_chars",)

    def run(self) -> int:
        fragments = read_manifest(self.context.path("extract_manifest"))
        logger.info(f"Merging {len(fragments)} fragments")

        entries = merge_counts(iter_fragment(path) for path in fragments)
        return write_wlpt_chars(self.context.path("wlpt_chars"), entries)
