"""Shared fixtures: a small tagged corpus in two files."""

from pathlib import Path

import pytest

from korpustables.config import Config

# word, unused, punctuation, lemma, pos, tag
FILE_A = """\
<s id="1">
Det\t_\t_\tdet\tPRON\tPRON_DEM
var\t_\t_\tvære\tV\tV_PAST
en\t_\t_\ten\tART\tART_INDEF
kold\t_\t_\tkold\tADJ\tADJ_SING
dag\t_\t$.\tdag\tN\tN_INDEF_SING
</s>
<s id="2">
Hunden\t_\t_\thund\tN\tN_DEF_SING
løb\t_\t_\tløbe\tV\tV_PAST
hurtigt\t_\t_\thurtig\tADV\tADV
over\t_\t_\tover\tPREP\tPREP
gaden\t_\t_\tgade\tN\tN_DEF_SING
</s>
"""

FILE_B = """\
<s id="3">
Det\t_\t_\tdet\tPRON\tPRON_DEM
var\t_\t_\tvære\tV\tV_PAST
en\t_\t_\ten\tART\tART_INDEF
god\t_\t_\tgod\tADJ\tADJ_SING
dag\t_\t_\tdag\tN\tN_INDEF_SING
for\t_\t_\tfor\tPREP\tPREP
hunden\t_\t_\thund\tN\tN_DEF_SING
og\t_\t$!\tog\tCONJ\tCONJ_COORD
</s>
"""

WORD_TOKENS = 18
PUNCTUATION_TOKENS = 2
SENTENCES = [
    "det var en kold dag",
    "hunden løb hurtigt over gaden",
    "det var en god dag for hunden og",
]


def write_corpus(corpus_dir: Path, files: dict[str, str]) -> Path:
    """Write corpus files (name -> content) below ``corpus_dir``."""
    for name, content in files.items():
        path = corpus_dir / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
    return corpus_dir


@pytest.fixture
def corpus_dir(tmp_path: Path) -> Path:
    """Two-file corpus: 3 sentences, 18 words, 2 punctuation marks."""
    return write_corpus(tmp_path / "corpus", {"a.txt": FILE_A, "sub/b.txt": FILE_B})


@pytest.fixture
def config(corpus_dir: Path, tmp_path: Path) -> Config:
    """Configuration running every stage in-process."""
    config = Config()
    config.input.corpus_dir = corpus_dir
    config.output.output_dir = tmp_path / "output"
    config.processing.show_progress = False
    return config
