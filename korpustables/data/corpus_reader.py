"""Discovery and line iteration over raw corpus files."""

import logging
from pathlib import Path
from typing import Iterator

from ..errors import ConfigurationError

logger = logging.getLogger(__name__)


def discover_corpus_files(corpus_dir: Path, pattern: str = "*") -> list[Path]:
    """
    Find all corpus files below a directory.

    Hidden files and files inside hidden directories are ignored. The
    result is sorted by path relative to ``corpus_dir``, which fixes the
    traversal order every later stage relies on.

    Args:
        corpus_dir: Root directory of the corpus
        pattern: Glob pattern matched recursively (default: every file)

    Returns:
        Sorted list of corpus file paths (possibly empty)

    Raises:
        ConfigurationError: If the directory does not exist
    """
    corpus_dir = Path(corpus_dir)
    if not corpus_dir.exists():
        raise ConfigurationError(f"Corpus directory does not exist: {corpus_dir}")
    if not corpus_dir.is_dir():
        raise ConfigurationError(f"Corpus path is not a directory: {corpus_dir}")

    files = []
    for path in corpus_dir.rglob(pattern):
        relative = path.relative_to(corpus_dir)
        if any(part.startswith(".") for part in relative.parts):
            continue
        if path.is_file():
            files.append(path)

    files.sort(key=lambda p: p.relative_to(corpus_dir).as_posix())

    if not files:
        logger.warning(f"No corpus files found in {corpus_dir} (pattern={pattern!r})")
    else:
        logger.info(f"Found {len(files)} corpus files")
    return files


def iter_corpus_lines(path: Path, encoding: str = "utf-8") -> Iterator[tuple[int, str]]:
    """
    Yield non-blank lines of a corpus file with their 1-based line numbers.

    Trailing newlines are removed; the content is otherwise untouched.
    """
    with open(path, "r", encoding=encoding) as f:
        for line_number, line in enumerate(f, 1):
            line = line.rstrip("\r\n")
            if not line.strip():
                continue
            yield line_number, line
