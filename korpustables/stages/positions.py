"""Word-position-in-sentence indexing against the WLPT dictionary."""

import logging
from pathlib import Path
from typing import Iterable, Iterator, Mapping, Optional

from ..data.corpus_reader import iter_corpus_lines
from ..data.tables import columns, concat_fragments, write_table
from ..errors import DictionaryMismatchError
from ..models import WLPT, FileResult, WPISRow
from ..normalization import is_markup, normalize_token, parse_token, sentence_id
from ..parallel import run_per_file
from .base import PipelineStage
from .merger import read_wlpt_chars

logger = logging.getLogger(__name__)

# Read-only lookup, loaded once per worker process by _init_lookup
_LOOKUP: Optional[dict[WLPT, int]] = None


def load_lookup(path: Path) -> dict[WLPT, int]:
    """Load the WLPT character table as a tuple -> surrogate ID mapping."""
    return {entry.key: entry.id for entry in read_wlpt_chars(path)}


def _init_lookup(path: str) -> None:
    global _LOOKUP
    _LOOKUP = load_lookup(Path(path))


def _release_lookup() -> None:
    global _LOOKUP
    _LOOKUP = None


def index_positions(
    lines: Iterable[tuple[int, str]],
    lookup: Mapping[WLPT, int],
    source: str = "<corpus>",
) -> Iterator[WPISRow]:
    """
    Emit one WPIS row per emitted token, in corpus order.

    A markup line carrying an id attribute starts a new sentence and
    resets the position to 1. Tokens are normalized exactly as the
    extractor does, so a token with punctuation yields two rows.

    Args:
        lines: ``(line_number, line)`` pairs
        lookup: WLPT -> surrogate ID mapping
        source: Name used in log and error messages

    Yields:
        WPISRow objects

    Raises:
        DictionaryMismatchError: If a normalized tuple is not in ``lookup``
    """
    current_id: Optional[str] = None
    position = 1
    warned = False

    for line_number, line in lines:
        if is_markup(line):
            new_id = sentence_id(line)
            if new_id is not None:
                current_id = new_id
                position = 1
            continue

        if current_id is None and not warned:
            logger.warning(f"{source}:{line_number}: token outside any sentence with an id")
            warned = True

        token = parse_token(line, source, line_number)
        for key in normalize_token(token):
            wlpt_id = lookup.get(key)
            if wlpt_id is None:
                raise DictionaryMismatchError(
                    f"{source}:{line_number}: tuple {tuple(key)!r} is not in the WLPT "
                    "dictionary; rerun the 'extract' and 'merge' stages on this corpus"
                )
            yield WPISRow(sentence_id=current_id or "", position=position, wlpt_id=wlpt_id)
            position += 1


def index_file(task: tuple) -> FileResult:
    """Worker: index one corpus file. Must be module-level for pickling."""
    source, fragment, encoding = task
    source, fragment = Path(source), Path(fragment)

    if _LOOKUP is None:
        raise RuntimeError("WLPT lookup not loaded in this worker")

    ids, positions, wlpt_ids = [], [], []
    for row in index_positions(iter_corpus_lines(source, encoding), _LOOKUP, source.name):
        ids.append(row.sentence_id)
        positions.append(row.position)
        wlpt_ids.append(row.wlpt_id)

    rows = write_table(
        fragment,
        {"id": ids, "position": positions, "wlpt_id": wlpt_ids},
        "wpis",
        header=False,
    )
    return FileResult(source=source, fragment=fragment, rows=rows, tokens=rows)


class PositionStage(PipelineStage):
    """Builds the word-position-in-sentence table."""

    name = "positions"
    requires = ("wlpt_chars",)
    produces = ("wpis",)
    reads_corpus = True

    def run(self) -> int:
        tasks = [
            (
                str(path),
                str(self.context.fragment_path(self.name, index, path)),
                self.context.encoding,
            )
            for index, path in enumerate(self.context.corpus_files)
        ]

        try:
            results = run_per_file(
                index_file,
                tasks,
                workers=self.context.workers,
                desc="Indexing positions",
                initializer=_init_lookup,
                initargs=(str(self.context.path("wlpt_chars")),),
                show_progress=self.context.show_progress,
            )
        finally:
            _release_lookup()

        concat_fragments(
            [result.fragment for result in results],
            self.context.path("wpis"),
            header=columns("wpis"),
        )

        count = sum(result.rows for result in results)
        logger.info(f"Indexed {count} token positions")
        return count
