"""Reading and writing of the tab-separated output tables."""

import csv
import json
import logging
import os
import shutil
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Iterable, Iterator, Optional, Sequence, Union

import pandas as pd

logger = logging.getLogger(__name__)

# Column schema of every table the pipeline reads back
SCHEMAS: dict[str, dict[str, type]] = {
    "fragment": {"word": str, "lemma": str, "pos": str, "tag": str, "incidence": int},
    "wlpt_chars": {
        "id": int,
        "word": str,
        "lemma": str,
        "pos": str,
        "tag": str,
        "incidence": int,
    },
    "words": {"id": int, "word": str, "incidence": int},
    "lemmas": {"id": int, "lemma": str, "incidence": int},
    "pos": {"id": int, "pos": str, "incidence": int},
    "tags": {"id": int, "tag": str, "incidence": int},
    "wlpt": {
        "id": int,
        "word_id": int,
        "lemma_id": int,
        "pos_id": int,
        "tag_id": int,
        "incidence": int,
    },
    # "id" here is the sentence id taken from corpus markup
    "wpis": {"id": str, "position": int, "wlpt_id": int},
    "letter_bigrams": {"lbigram": str, "incidence": int},
}

# Characters that cannot appear in an unquoted TSV field
UNSAFE_PATTERN = r"[\t\r\n]"


def columns(schema: str) -> list[str]:
    """Return the ordered column names of a table schema."""
    return list(SCHEMAS[schema])


@contextmanager
def atomic_path(path: Union[str, Path]) -> Iterator[Path]:
    """
    Yield a temporary sibling of ``path`` and move it into place on success.

    An existing output file is therefore always complete; a failed write
    leaves no file behind.
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp_path = path.with_name(f".{path.name}.partial")
    try:
        yield tmp_path
        os.replace(tmp_path, path)
    finally:
        if tmp_path.exists():
            tmp_path.unlink()


def write_table(
    path: Union[str, Path],
    data: Union[pd.DataFrame, Sequence[dict], dict[str, list]],
    schema: str,
    header: bool = True,
) -> int:
    """
    Write a table as UTF-8 TSV.

    Values are written verbatim, without CSV quoting, so a ``"`` token is
    stored as ``"``.

    Args:
        path: Destination file.
        data: DataFrame, list of row dicts or dict of column lists.
        schema: Name of the table schema in SCHEMAS.
        header: Whether to write the header row.

    Returns:
        Number of rows written.

    Raises:
        ValueError: If a text value contains a tab or line break.
    """
    names = columns(schema)
    df = data if isinstance(data, pd.DataFrame) else pd.DataFrame(data, columns=names)
    if df.empty:
        df = pd.DataFrame(columns=names)

    for name, kind in SCHEMAS[schema].items():
        if kind is str and not df.empty:
            bad = df[name].astype(str).str.contains(UNSAFE_PATTERN, regex=True)
            if bad.any():
                raise ValueError(
                    f"Column '{name}' of {Path(path).name} has values containing a tab "
                    f"or line break: {df.loc[bad, name].head(5).tolist()!r}"
                )

    with atomic_path(path) as tmp_path:
        df.to_csv(
            tmp_path,
            sep="\t",
            index=False,
            header=header,
            columns=names,
            encoding="utf-8",
            quoting=csv.QUOTE_NONE,
        )

    logger.debug(f"Wrote {len(df)} rows to {path}")
    return len(df)


def read_table(path: Union[str, Path], schema: str) -> pd.DataFrame:
    """
    Read a TSV table written by ``write_table``.

    NA inference and quote handling are disabled so that tokens such as
    ``NA``, ``null``, ``nan`` or ``"`` come back exactly as written.

    Args:
        path: Table file.
        schema: Name of the table schema in SCHEMAS.

    Returns:
        DataFrame with the schema's columns and dtypes.

    Raises:
        FileNotFoundError: If the table does not exist.
        ValueError: If required columns are missing.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Table not found: {path}")

    df = pd.read_csv(
        path,
        sep="\t",
        dtype=str,
        keep_default_na=False,
        na_filter=False,
        quoting=csv.QUOTE_NONE,
        encoding="utf-8",
    )

    missing = set(SCHEMAS[schema]) - set(df.columns)
    if missing:
        raise ValueError(f"Missing required columns in {path.name}: {sorted(missing)}")

    df = df[columns(schema)]
    int_columns = [name for name, kind in SCHEMAS[schema].items() if kind is int]
    if int_columns:
        df = df.astype({name: "int64" for name in int_columns})
    return df


def concat_fragments(
    fragments: Iterable[Path],
    path: Union[str, Path],
    header: Optional[Sequence[str]] = None,
) -> None:
    """
    Concatenate headerless fragment files into one output file.

    Args:
        fragments: Fragment files, in output order.
        path: Destination file.
        header: Column names to write as the first line, if any.
    """
    with atomic_path(path) as tmp_path:
        with open(tmp_path, "wb") as out:
            if header is not None:
                out.write(("\t".join(header) + "\n").encode("utf-8"))
            for fragment in fragments:
                with open(fragment, "rb") as f:
                    shutil.copyfileobj(f, out)


def write_json(path: Union[str, Path], payload: Any) -> None:
    """Write ``payload`` to ``path`` as UTF-8 JSON, atomically."""
    with atomic_path(path) as tmp_path:
        with open(tmp_path, "w", encoding="utf-8") as f:
            json.dump(payload, f, ensure_ascii=False, indent=2)
            f.write("\n")


def read_json(path: Union[str, Path]) -> Any:
    """Load a JSON file."""
    with open(path, "r", encoding="utf-8") as f:
        return json.load(f)
