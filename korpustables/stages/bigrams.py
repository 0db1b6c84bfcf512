"""Letter bigram aggregation over the word dictionary."""

import logging
from collections import Counter
from typing import Iterable

from ..config import DANISH_ALPHABET
from ..data.tables import read_table, write_table
from .base import PipelineStage

logger = logging.getLogger(__name__)


def count_bigrams(
    words: Iterable[tuple[str, int]],
    alphabet: str = DANISH_ALPHABET,
) -> list[tuple[str, int]]:
    """
    Count overlapping letter bigrams weighted by word incidence.

    A word of length L contributes its L-1 overlapping bigrams; each
    bigram whose two characters are not both in ``alphabet`` is dropped.

    Args:
        words: ``(word, incidence)`` pairs
        alphabet: Allowed characters

    Returns:
        ``(bigram, incidence)`` pairs, highest incidence first, ties by bigram

    Example:
        >>> count_bigrams([("abe", 10), ("a-b", 3)])
        [('ab', 10), ('be', 10)]
    """
    allowed = set(alphabet)
    counts: Counter[str] = Counter()

    for word, incidence in words:
        for i in range(len(word) - 1):
            bigram = word[i:i + 2]
            if bigram[0] in allowed and bigram[1] in allowed:
                counts[bigram] += incidence

    return sorted(counts.items(), key=lambda item: (-item[1], item[0]))


class BigramStage(PipelineStage):
    """Builds the letter bigram table from the word dictionary."""

    name = "bigrams"
    requires = ("words",)
    produces = ("letter_bigrams",)

    def run(self) -> int:
        words = read_table(self.context.path("words"), "words")
        ranked = count_bigrams(
            zip(words["word"], words["incidence"].astype(int)),
            alphabet=self.context.config.bigrams.alphabet,
        )

        rows = write_table(
            self.context.path("letter_bigrams"),
            {
                "lbigram": [bigram for bigram, _ in ranked],
                "incidence": [incidence for _, incidence in ranked],
            },
            "letter_bigrams",
        )
        logger.info(f"Counted {rows} distinct letter bigrams over {len(words)} words")
        return rows
