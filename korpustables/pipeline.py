"""Main pipeline orchestrator for building corpus tables."""

import logging
import shutil
import time
from typing import Optional

from .config import Config
from .data.corpus_reader import discover_corpus_files
from .errors import ConfigurationError, MissingPrerequisiteError
from .models import StageResult
from .stages import STAGE_REGISTRY, TABLE_PRODUCERS, PipelineStage, StageContext
from .validation import validate_outputs

logger = logging.getLogger(__name__)


class CorpusPipeline:
    """
    Main pipeline for turning a tagged corpus into relational tables.

    Orders the selected stages, checks that every required table exists
    or will be produced earlier in the run, then executes the stages one
    after another. Per-file stages fan out over a process pool; the
    reductions run in this process.
    """

    def __init__(self, config: Config):
        """
        Initialize the pipeline.

        Args:
            config: Pipeline configuration.
        """
        self.config = config
        self.context: Optional[StageContext] = None
        self.stages: list[PipelineStage] = []
        self.skipped: set[str] = set()

    def plan(self) -> list[PipelineStage]:
        """
        Resolve the selected stages and verify their prerequisites.

        Stages always run in canonical order. Nothing is executed here, so
        configuration errors surface before any output is written. With
        ``skip_existing``, a stage whose outputs exist is marked skipped and
        its inputs are not required.

        Returns:
            Stage instances in execution order.

        Raises:
            ConfigurationError: If the corpus directory is needed but unusable.
            MissingPrerequisiteError: If a required table is neither on disk
                nor produced by an earlier selected stage.
        """
        selected = set(self.config.processing.stages)
        stage_classes = [cls for name, cls in STAGE_REGISTRY.items() if name in selected]

        corpus_files = []
        if any(cls.reads_corpus for cls in stage_classes):
            if self.config.input.corpus_dir is None:
                raise ConfigurationError("Corpus directory is required (use --input or --config)")
            corpus_files = discover_corpus_files(
                self.config.input.corpus_dir, self.config.input.pattern
            )

        self.context = StageContext(config=self.config, corpus_files=corpus_files)
        self.stages = [cls(self.context) for cls in stage_classes]

        self.skipped = set()
        produced: set[str] = set()
        for stage in self.stages:
            if self.config.processing.skip_existing and stage.outputs_exist():
                # Skipped stages never read their inputs
                self.skipped.add(stage.name)
                produced.update(stage.produces)
                continue
            for table in stage.requires:
                if table in produced:
                    continue
                path = self.context.path(table)
                if not path.exists():
                    producer = TABLE_PRODUCERS[table]
                    raise MissingPrerequisiteError(
                        f"Stage '{stage.name}' needs table '{table}' ({path}), which does not "
                        f"exist; run the '{producer}' stage first"
                    )
            produced.update(stage.produces)

        return self.stages

    def run(self) -> dict[str, StageResult]:
        """
        Execute the planned stages.

        Returns:
            Mapping of stage name to its StageResult, in execution order.
        """
        logger.info("Starting corpus table pipeline")
        self.plan()

        self.config.output.output_dir.mkdir(parents=True, exist_ok=True)
        logger.info(f"Input: {self.config.input.corpus_dir}")
        logger.info(f"Output: {self.config.output.output_dir}")
        logger.info(f"Stages: {', '.join(stage.name for stage in self.stages)}")
        logger.info(f"Workers: {self.config.processing.workers}")

        results: dict[str, StageResult] = {}
        pipeline_start = time.perf_counter()

        for stage in self.stages:
            if stage.name in self.skipped:
                logger.info(f"Skipping stage '{stage.name}': outputs already exist")
                results[stage.name] = StageResult(stage=stage.name, status="skipped")
                continue

            logger.info(f"Running stage '{stage.name}'")
            start = time.perf_counter()
            rows = stage.run()
            elapsed = time.perf_counter() - start

            logger.info(f"Stage '{stage.name}' finished: {rows} rows in {elapsed:.2f}s")
            results[stage.name] = StageResult(
                stage=stage.name, status="completed", rows=rows, elapsed=elapsed
            )

        if self.config.processing.validate_tables:
            validate_outputs(self.config)

        self._cleanup_work_dir()

        logger.info(f"Pipeline complete in {time.perf_counter() - pipeline_start:.2f}s")
        return results

    def _cleanup_work_dir(self) -> None:
        """Remove per-file fragments unless configured to keep them."""
        work_dir = self.config.work_dir
        if self.config.processing.keep_work_dir or not work_dir.exists():
            return
        names = {stage.name for stage in self.stages}
        if "extract" in names and "merge" not in names:
            # Fragments are the only output of this run
            logger.info(f"Keeping work directory {work_dir} for a later 'merge' run")
            return
        logger.debug(f"Removing work directory {work_dir}")
        shutil.rmtree(work_dir, ignore_errors=True)
