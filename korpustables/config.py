"""Configuration management for the corpus table pipeline."""

from pathlib import Path
from typing import Literal, Optional

import yaml
from pydantic import BaseModel, Field, field_validator

StageName = Literal["extract", "merge", "dictionaries", "sentences", "positions", "bigrams"]

ALL_STAGES: list[str] = ["extract", "merge", "dictionaries", "sentences", "positions", "bigrams"]

DANISH_ALPHABET = "abcdefghijklmnopqrstuvwxyzæøå"


class InputConfig(BaseModel):
    """Configuration for the raw corpus."""

    corpus_dir: Optional[Path] = None
    pattern: str = Field(default="*", description="Glob pattern matched recursively")
    encoding: str = "utf-8"


class OutputConfig(BaseModel):
    """Configuration for output tables."""

    output_dir: Path = Path("output")
    wlpt_chars_file: str = "wlpt_chars.tsv"
    words_file: str = "words.tsv"
    lemmas_file: str = "lemmas.tsv"
    pos_file: str = "pos.tsv"
    tags_file: str = "tags.tsv"
    wlpt_file: str = "wlpt.tsv"
    wpis_file: str = "wpis.tsv"
    letter_bigrams_file: str = "letter_bigrams.tsv"
    sentences_file: str = "sentences.txt"


class ProcessingConfig(BaseModel):
    """Configuration for stage selection and execution."""

    stages: list[StageName] = Field(default_factory=lambda: list(ALL_STAGES))
    workers: int = Field(default=1, ge=1)
    skip_existing: bool = Field(
        default=False, description="Skip stages whose output tables already exist"
    )
    work_dir: Optional[Path] = Field(
        default=None, description="Directory for per-file fragments (default: <output_dir>/.work)"
    )
    keep_work_dir: bool = False
    validate_tables: bool = False
    show_progress: bool = True

    @field_validator("stages")
    @classmethod
    def check_stages(cls, v: list[str]) -> list[str]:
        """Reject an empty selection and drop duplicates."""
        if not v:
            raise ValueError("At least one stage must be selected")
        return list(dict.fromkeys(v))


class BigramConfig(BaseModel):
    """Configuration for letter bigram aggregation."""

    alphabet: str = Field(default=DANISH_ALPHABET, min_length=1)


class Config(BaseModel):
    """Main configuration for the corpus table pipeline."""

    input: InputConfig = Field(default_factory=InputConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)
    processing: ProcessingConfig = Field(default_factory=ProcessingConfig)
    bigrams: BigramConfig = Field(default_factory=BigramConfig)

    @property
    def work_dir(self) -> Path:
        """Directory holding per-file fragments."""
        if self.processing.work_dir is not None:
            return self.processing.work_dir
        return self.output.output_dir / ".work"

    def table_path(self, table: str) -> Path:
        """
        Resolve the path of a table by its key.

        Args:
            table: Table key, e.g. ``"words"`` or ``"extract_manifest"``

        Returns:
            Path of the table file
        """
        if table == "extract_manifest":
            return self.work_dir / "extract" / "manifest.json"
        file_name = getattr(self.output, f"{table}_file", None)
        if file_name is None:
            raise KeyError(f"Unknown table: {table}")
        return self.output.output_dir / file_name

    @classmethod
    def from_yaml(cls, path: str | Path) -> "Config":
        """Load configuration from a YAML file."""
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
        return cls(**data)

    def to_yaml(self, path: str | Path) -> None:
        """Save configuration to a YAML file."""
        data = self.model_dump(mode="json")
        with open(path, "w", encoding="utf-8") as f:
            yaml.dump(data, f, default_flow_style=False, allow_unicode=True)
