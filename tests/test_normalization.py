"""Tests for line parsing and token normalization."""

import pytest

from korpustables.errors import CorpusFormatError
from korpustables.models import WLPT, TokenRecord
from korpustables.normalization import (
    is_markup,
    normalize_punctuation,
    normalize_token,
    parse_token,
    sentence_id,
)


class TestMarkup:
    """Tests for markup line detection."""

    def test_markup_lines(self):
        assert is_markup('<s id="1">')
        assert is_markup("</s>")
        assert is_markup("<text>  \n")

    def test_token_lines_are_not_markup(self):
        assert not is_markup("Det\t_\t_\tdet\tPRON\tPRON_DEM")
        assert not is_markup("<\t_\t_\t<\tX\tX")

    def test_sentence_id(self):
        assert sentence_id('<s id="17">') == "17"
        assert sentence_id("<s id='a-3'>") == "a-3"
        assert sentence_id("<s id=42>") == "42"
        assert sentence_id("</s>") is None
        assert sentence_id('<text fid="9">') is None


class TestParseToken:
    """Tests for token line parsing."""

    def test_fields(self):
        token = parse_token("Huset\tx\t$.\thus\tN\tN_DEF_SING\textra\n")
        assert token == TokenRecord("Huset", "$.", "hus", "N", "N_DEF_SING")

    def test_too_few_fields(self):
        with pytest.raises(CorpusFormatError, match="corpus.txt:7"):
            parse_token("Huset\tx\t$.\thus\tN", "corpus.txt", 7)


class TestNormalizeToken:
    """Tests for the shared normalization."""

    def test_lowercases_word_and_lemma(self):
        keys = normalize_token(TokenRecord("Huset", "_", "Hus", "N", "N_DEF"))
        assert keys == [WLPT("huset", "hus", "N", "N_DEF")]

    def test_tag_truncated_to_fifteen_characters(self):
        keys = normalize_token(TokenRecord("a", "", "a", "X", "ABCDEFGHIJKLMNOPQRST"))
        assert keys[0].tag == "ABCDEFGHIJKLMNO"

    def test_punctuation_split(self):
        keys = normalize_token(TokenRecord("huset", "$.", "hus", "N", "N_DEF_SING"))
        assert keys == [
            WLPT("huset", "hus", "N", "N_DEF_SING"),
            WLPT(".", ".", "NA", "NA"),
        ]

    def test_underscore_only_punctuation_is_empty(self):
        keys = normalize_token(TokenRecord("og", "__", "og", "CONJ", "CONJ"))
        assert len(keys) == 1

    def test_punctuation_rules(self):
        assert normalize_punctuation("_$,_") == ","
        assert normalize_punctuation("$") == "$"
        assert normalize_punctuation("_$_") == "$"
        assert normalize_punctuation("$$") == "$"
        assert normalize_punctuation(",") == ","


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
