"""Token extraction and per-file incidence counting."""

import logging
from collections import Counter
from pathlib import Path
from typing import Iterable

from ..data.corpus_reader import iter_corpus_lines
from ..data.tables import read_json, write_json, write_table
from ..models import WLPT, FileResult
from ..normalization import is_markup, is_truncated, normalize_token, parse_token
from ..parallel import run_per_file
from .base import PipelineStage

logger = logging.getLogger(__name__)


def count_tuples(lines: Iterable[tuple[int, str]], source: str = "<corpus>") -> Counter:
    """
    Count WLPT tuples in a stream of corpus lines.

    Markup lines are skipped. Every token contributes its primary tuple
    and, when it carries punctuation, the punctuation pseudo-tuple.

    Args:
        lines: ``(line_number, line)`` pairs
        source: Name used in error messages

    Returns:
        Counter mapping WLPT to incidence, in first-seen order
    """
    counts: Counter[WLPT] = Counter()
    truncated = 0

    for line_number, line in lines:
        if is_markup(line):
            continue
        token = parse_token(line, source, line_number)
        if is_truncated(token):
            truncated += 1
        for key in normalize_token(token):
            counts[key] += 1

    if truncated:
        logger.debug(f"{source}: {truncated} tags truncated")
    return counts


def write_fragment(path: Path, counts: Counter) -> int:
    """Write a tuple/incidence fragment and return its row count."""
    data = {
        "word": [key.word for key in counts],
        "lemma": [key.lemma for key in counts],
        "pos": [key.pos for key in counts],
        "tag": [key.tag for key in counts],
        "incidence": list(counts.values()),
    }
    return write_table(path, data, "fragment")


def extract_file(task: tuple) -> FileResult:
    """Worker: count one corpus file. Must be module-level for pickling."""
    source, fragment, encoding = task
    source, fragment = Path(source), Path(fragment)

    counts = count_tuples(iter_corpus_lines(source, encoding), source.name)
    rows = write_fragment(fragment, counts)

    return FileResult(source=source, fragment=fragment, rows=rows, tokens=sum(counts.values()))


def read_manifest(path: Path) -> list[Path]:
    """Return the fragment paths listed in an extract manifest, in corpus order."""
    manifest = read_json(path)
    return [path.parent / name for name in manifest["fragments"]]


class ExtractStage(PipelineStage):
    """Counts WLPT tuples per corpus file into fragments."""

    name = "extract"
    produces = ("extract_manifest",)
    # The manifest lives in the work directory, which is removed after merging
    satisfied_by = ("wlpt_chars",)
    reads_corpus = True

    def run(self) -> int:
        files = self.context.corpus_files
        tasks = [
            (
                str(path),
                str(self.context.fragment_path(self.name, index, path)),
                self.context.encoding,
            )
            for index, path in enumerate(files)
        ]

        results = run_per_file(
            extract_file,
            tasks,
            workers=self.context.workers,
            desc="Extracting",
            show_progress=self.context.show_progress,
        )

        tokens = sum(result.tokens for result in results)
        rows = sum(result.rows for result in results)

        # Written last: its presence means every fragment is complete
        write_json(
            self.context.path("extract_manifest"),
            {
                "sources": [str(result.source) for result in results],
                "fragments": [result.fragment.name for result in results],
                "tokens": tokens,
            },
        )

        logger.info(f"Extracted {tokens} tokens ({rows} per-file tuples) from {len(files)} files")
        return rows
