"""Line format and token normalization shared by the extractor and position indexer."""

import re
from typing import Optional

from .errors import CorpusFormatError
from .models import WLPT, TokenRecord

# Fixed-width tag policy: anything past this is discarded
TAG_WIDTH = 15

# POS and tag given to punctuation pseudo-tokens
PSEUDO_TAG = "NA"

# Token lines carry at least: word, (unused), punctuation, lemma, pos, tag
MIN_FIELDS = 6

MARKUP_PATTERN = re.compile(r"^<.*>$")
SENTENCE_ID_PATTERN = re.compile(r"""\bid\s*=\s*(?:"([^"]*)"|'([^']*)'|([^\s>]+))""")


def is_markup(line: str) -> bool:
    """Return True for lines wholly enclosed in angle brackets."""
    return MARKUP_PATTERN.match(line.rstrip()) is not None


def sentence_id(line: str) -> Optional[str]:
    """
    Extract the id attribute of a markup line.

    Args:
        line: A markup line such as ``<s id="1234">``

    Returns:
        The attribute value, or None if the line carries no id.

    Example:
        >>> sentence_id('<s id="42">')
        '42'
        >>> sentence_id('</s>') is None
        True
    """
    match = SENTENCE_ID_PATTERN.search(line)
    if not match:
        return None
    return next(group for group in match.groups() if group is not None)


def parse_token(line: str, source: str = "<corpus>", line_number: int = 0) -> TokenRecord:
    """
    Split a tab-separated token line into its fields.

    Args:
        line: Raw token line (trailing newline allowed)
        source: Name of the file the line came from, for error messages
        line_number: 1-based line number, for error messages

    Returns:
        TokenRecord with the raw (not yet normalized) fields

    Raises:
        CorpusFormatError: If the line has fewer than six fields
    """
    fields = line.rstrip("\r\n").split("\t")
    if len(fields) < MIN_FIELDS:
        raise CorpusFormatError(
            f"{source}:{line_number}: expected at least {MIN_FIELDS} tab-separated "
            f"fields, found {len(fields)}"
        )
    return TokenRecord(
        word=fields[0],
        punctuation=fields[2],
        lemma=fields[3],
        pos=fields[4],
        tag=fields[5],
    )


def normalize_punctuation(value: str) -> str:
    """
    Normalize the punctuation marker field.

    Underscores are removed; for values longer than one character the
    first ``$`` is dropped (``"$."`` becomes ``"."``, a lone ``"$"`` stays).
    """
    value = value.replace("_", "")
    if len(value) > 1 and "$" in value:
        value = value.replace("$", "", 1)
    return value


def normalize_token(token: TokenRecord) -> list[WLPT]:
    """
    Turn a token into the vocabulary keys it contributes.

    The first key is always the token itself (word and lemma lowercased,
    tag truncated). A non-empty punctuation marker adds a second,
    independent pseudo-token ``(p, p, "NA", "NA")``.

    Args:
        token: Parsed token record

    Returns:
        One or two WLPT keys, in emission order

    Example:
        >>> normalize_token(TokenRecord("Huset", "$.", "hus", "N", "N_DEF_SING"))
        [WLPT(word='huset', lemma='hus', pos='N', tag='N_DEF_SING'), WLPT(word='.', lemma='.', pos='NA', tag='NA')]
    """
    keys = [
        WLPT(
            word=token.word.lower(),
            lemma=token.lemma.lower(),
            pos=token.pos,
            tag=token.tag[:TAG_WIDTH],
        )
    ]
    punctuation = normalize_punctuation(token.punctuation)
    if punctuation:
        keys.append(WLPT(punctuation, punctuation, PSEUDO_TAG, PSEUDO_TAG))
    return keys


def is_truncated(token: TokenRecord) -> bool:
    """Return True if normalization loses part of the token's tag."""
    return len(token.tag) > TAG_WIDTH
