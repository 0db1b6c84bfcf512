"""Base class for pipeline stages."""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from pathlib import Path

from ..config import Config


@dataclass
class StageContext:
    """Everything a stage needs to locate its inputs and outputs."""

    config: Config
    corpus_files: list[Path] = field(default_factory=list)

    def path(self, table: str) -> Path:
        """Return the path of a table by key."""
        return self.config.table_path(table)

    def fragment_dir(self, stage: str) -> Path:
        """Return (and create) the work directory for a stage's fragments."""
        directory = self.config.work_dir / stage
        directory.mkdir(parents=True, exist_ok=True)
        return directory

    def fragment_path(self, stage: str, index: int, source: Path, suffix: str = ".tsv") -> Path:
        """
        Build a fragment file name for one corpus file.

        The index prefix keeps names unique when corpus files in different
        directories share a name, and keeps them in corpus order.
        """
        return self.fragment_dir(stage) / f"{index:06d}_{source.stem}{suffix}"

    @property
    def workers(self) -> int:
        return self.config.processing.workers

    @property
    def encoding(self) -> str:
        return self.config.input.encoding

    @property
    def show_progress(self) -> bool:
        return self.config.processing.show_progress


class PipelineStage(ABC):
    """
    Base class for all pipeline stages.

    A stage declares the tables it reads (``requires``) and writes
    (``produces``) by key; the pipeline uses these to order stages, check
    prerequisites and skip stages whose outputs already exist.
    """

    name: str = ""
    requires: tuple[str, ...] = ()
    produces: tuple[str, ...] = ()
    # Downstream tables whose presence also means this stage has run
    satisfied_by: tuple[str, ...] = ()
    reads_corpus: bool = False

    def __init__(self, context: StageContext):
        """
        Initialize the stage.

        Args:
            context: Shared pipeline context.
        """
        self.context = context

    @abstractmethod
    def run(self) -> int:
        """
        Execute the stage.

        Returns:
            Number of rows (or lines) in the stage's main output.
        """
        pass

    def outputs_exist(self) -> bool:
        """Return True if every output table of this stage is on disk."""
        if all(self.context.path(table).exists() for table in self.produces):
            return True
        return bool(self.satisfied_by) and all(
            self.context.path(table).exists() for table in self.satisfied_by
        )

    def __repr__(self) -> str:
        """String representation."""
        return f"{self.__class__.__name__}(name={self.name!r})"
