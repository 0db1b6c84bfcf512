"""Tests for table I/O and corpus file discovery."""

import pytest

from korpustables.data.corpus_reader import discover_corpus_files, iter_corpus_lines
from korpustables.data.tables import concat_fragments, read_table, write_table
from korpustables.errors import ConfigurationError


class TestTables:
    """Tests for TSV reading and writing."""

    def test_na_like_strings_survive(self, tmp_path):
        """Values pandas would normally turn into NaN must stay strings."""
        path = tmp_path / "words.tsv"
        write_table(path, {"id": [1, 2, 3], "word": ["NA", "null", "nan"], "incidence": [1, 1, 1]}, "words")

        df = read_table(path, "words")
        assert df["word"].tolist() == ["NA", "null", "nan"]
        assert df["id"].dtype == "int64"

    def test_quote_characters_written_verbatim(self, tmp_path):
        """Quote marks must reach the file as-is, not CSV-escaped."""
        path = tmp_path / "words.tsv"
        write_table(path, {"id": [1, 2], "word": ['"', "'n"], "incidence": [4, 1]}, "words")

        assert path.read_text(encoding="utf-8") == 'id\tword\tincidence\n1\t"\t4\n2\t\'n\t1\n'
        assert read_table(path, "words")["word"].tolist() == ['"', "'n"]

    def test_tab_in_value_rejected(self, tmp_path):
        path = tmp_path / "words.tsv"
        with pytest.raises(ValueError, match="tab or line break"):
            write_table(path, {"id": [1], "word": ["a\tb"], "incidence": [1]}, "words")
        assert not path.exists()

    def test_empty_table_has_header(self, tmp_path):
        path = tmp_path / "tags.tsv"
        assert write_table(path, [], "tags") == 0
        assert path.read_text(encoding="utf-8") == "id\ttag\tincidence\n"
        assert read_table(path, "tags").empty

    def test_missing_columns(self, tmp_path):
        path = tmp_path / "pos.tsv"
        path.write_text("id\tpos\n1\tN\n", encoding="utf-8")
        with pytest.raises(ValueError, match="incidence"):
            read_table(path, "pos")

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            read_table(tmp_path / "absent.tsv", "pos")

    def test_no_partial_file_left(self, tmp_path):
        write_table(tmp_path / "pos.tsv", {"id": [1], "pos": ["N"], "incidence": [2]}, "pos")
        assert [p.name for p in tmp_path.iterdir()] == ["pos.tsv"]

    def test_concat_fragments(self, tmp_path):
        first = tmp_path / "0.tsv"
        second = tmp_path / "1.tsv"
        write_table(first, {"id": ["1"], "position": [1], "wlpt_id": [7]}, "wpis", header=False)
        write_table(second, {"id": ["2"], "position": [1], "wlpt_id": [8]}, "wpis", header=False)

        out = tmp_path / "wpis.tsv"
        concat_fragments([first, second], out, header=["id", "position", "wlpt_id"])
        assert out.read_text(encoding="utf-8") == "id\tposition\twlpt_id\n1\t1\t7\n2\t1\t8\n"


class TestCorpusReader:
    """Tests for corpus discovery and line iteration."""

    def test_sorted_and_hidden_skipped(self, tmp_path):
        for name in ("b.txt", "a/z.txt", "a/b.txt", ".hidden/x.txt", ".dot.txt"):
            path = tmp_path / name
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text("x", encoding="utf-8")

        files = discover_corpus_files(tmp_path)
        assert [p.relative_to(tmp_path).as_posix() for p in files] == ["a/b.txt", "a/z.txt", "b.txt"]

    def test_pattern(self, tmp_path):
        (tmp_path / "a.vrt").write_text("x", encoding="utf-8")
        (tmp_path / "notes.md").write_text("x", encoding="utf-8")
        assert [p.name for p in discover_corpus_files(tmp_path, "*.vrt")] == ["a.vrt"]

    def test_not_a_directory(self, tmp_path):
        path = tmp_path / "file.txt"
        path.write_text("x", encoding="utf-8")
        with pytest.raises(ConfigurationError, match="not a directory"):
            discover_corpus_files(path)

    def test_blank_lines_skipped(self, tmp_path):
        path = tmp_path / "c.txt"
        path.write_text("<s id=\"1\">\n\n   \nord\t_\t_\tord\tN\tN\r\n", encoding="utf-8")
        assert list(iter_corpus_lines(path)) == [(1, '<s id="1">'), (4, "ord\t_\t_\tord\tN\tN")]


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
