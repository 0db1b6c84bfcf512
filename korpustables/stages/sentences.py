"""Reassembly of lowercased, space-joined sentences from the raw corpus."""

import logging
from pathlib import Path
from typing import Iterable, Iterator

from ..data.corpus_reader import iter_corpus_lines
from ..data.tables import atomic_path, concat_fragments
from ..models import FileResult
from ..normalization import is_markup, parse_token
from ..parallel import run_per_file
from .base import PipelineStage

logger = logging.getLogger(__name__)


def assemble_sentences(lines: Iterable[tuple[int, str]], source: str = "<corpus>") -> Iterator[str]:
    """
    Rebuild sentences from corpus lines.

    Surface forms are lowercased and joined with single spaces.
    Punctuation markers are not emitted as words. Any markup line ends
    the pending sentence; markup with nothing pending is ignored. A
    sentence still pending at end of input is flushed too.

    Args:
        lines: ``(line_number, line)`` pairs
        source: Name used in error messages

    Yields:
        One string per sentence

    Example:
        >>> list(assemble_sentences(enumerate(['<s id="1">', 'Det\\t_\\t\\tdet\\tPRON\\tP', '</s>'], 1)))
        ['det']
    """
    pending: list[str] = []

    for line_number, line in lines:
        if is_markup(line):
            if pending:
                yield " ".join(pending)
                pending = []
            continue
        pending.append(parse_token(line, source, line_number).word.lower())

    if pending:
        yield " ".join(pending)


def assemble_file(task: tuple) -> FileResult:
    """Worker: write the sentences of one corpus file to a fragment."""
    source, fragment, encoding = task
    source, fragment = Path(source), Path(fragment)

    count = 0
    with atomic_path(fragment) as tmp_path:
        with open(tmp_path, "w", encoding="utf-8") as out:
            for sentence in assemble_sentences(iter_corpus_lines(source, encoding), source.name):
                out.write(sentence + "\n")
                count += 1

    return FileResult(source=source, fragment=fragment, rows=count)


class SentenceStage(PipelineStage):
    """Writes one lowercased sentence per line."""

    name = "sentences"
    produces = ("sentences",)
    reads_corpus = True

    def run(self) -> int:
        tasks = [
            (
                str(path),
                str(self.context.fragment_path(self.name, index, path, suffix=".txt")),
                self.context.encoding,
            )
            for index, path in enumerate(self.context.corpus_files)
        ]

        results = run_per_file(
            assemble_file,
            tasks,
            workers=self.context.workers,
            desc="Assembling sentences",
            show_progress=self.context.show_progress,
        )

        concat_fragments([result.fragment for result in results], self.context.path("sentences"))

        count = sum(result.rows for result in results)
        logger.info(f"Assembled {count} sentences")
        return count
