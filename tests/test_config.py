"""Tests for configuration."""

from pathlib import Path

import pytest
from pydantic import ValidationError

from korpustables.config import ALL_STAGES, DANISH_ALPHABET, Config, ProcessingConfig


class TestConfig:
    """Tests for configuration."""

    def test_defaults(self):
        """Test default values."""
        config = Config()

        assert config.input.corpus_dir is None
        assert config.input.pattern == "*"
        assert config.processing.stages == ALL_STAGES
        assert config.processing.workers == 1
        assert config.bigrams.alphabet == DANISH_ALPHABET
        assert config.work_dir == Path("output") / ".work"

    def test_config_from_yaml(self, tmp_path):
        """Test loading config from YAML."""
        yaml_content = """
input:
  corpus_dir: "data/corpus"
  pattern: "*.vrt"

output:
  output_dir: "data/tables"
  words_file: "ord.tsv"

processing:
  stages: [bigrams, extract, merge, extract]
  workers: 4
"""
        config_path = tmp_path / "config.yaml"
        config_path.write_text(yaml_content)

        config = Config.from_yaml(config_path)
        assert config.input.corpus_dir == Path("data/corpus")
        assert config.input.pattern == "*.vrt"
        assert config.processing.workers == 4
        assert config.processing.stages == ["bigrams", "extract", "merge"]
        assert config.table_path("words") == Path("data/tables/ord.tsv")

    def test_empty_yaml(self, tmp_path):
        config_path = tmp_path / "config.yaml"
        config_path.write_text("")
        assert Config.from_yaml(config_path) == Config()

    def test_yaml_round_trip(self, tmp_path):
        config = Config()
        config.input.corpus_dir = tmp_path / "corpus"
        config.processing.workers = 3
        config.bigrams.alphabet = "abcæ"

        config_path = tmp_path / "saved.yaml"
        config.to_yaml(config_path)

        loaded = Config.from_yaml(config_path)
        assert loaded.input.corpus_dir == tmp_path / "corpus"
        assert loaded.processing.workers == 3
        assert loaded.bigrams.alphabet == "abcæ"

    def test_repository_config(self):
        """The example config.yaml shipped with the project must load."""
        config = Config.from_yaml(Path(__file__).parent.parent / "config.yaml")
        assert config.processing.stages == ALL_STAGES

    def test_table_paths(self, tmp_path):
        config = Config()
        config.output.output_dir = tmp_path

        assert config.table_path("wpis") == tmp_path / "wpis.tsv"
        assert config.table_path("sentences") == tmp_path / "sentences.txt"
        assert config.table_path("extract_manifest") == tmp_path / ".work" / "extract" / "manifest.json"

        config.processing.work_dir = tmp_path / "scratch"
        assert config.table_path("extract_manifest") == tmp_path / "scratch" / "extract" / "manifest.json"

        with pytest.raises(KeyError):
            config.table_path("nonsense")


class TestProcessingConfig:
    """Tests for processing validation."""

    def test_unknown_stage(self):
        with pytest.raises(ValidationError):
            ProcessingConfig(stages=["extract", "tokenize"])

    def test_empty_stage_list(self):
        with pytest.raises(ValidationError, match="At least one stage"):
            ProcessingConfig(stages=[])

    def test_workers_must_be_positive(self):
        with pytest.raises(ValidationError):
            ProcessingConfig(workers=0)


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
