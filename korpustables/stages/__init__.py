"""Pipeline stages."""

from .base import PipelineStage, StageContext
from .bigrams import BigramStage
from .dictionaries import DictionaryStage
from .extractor import ExtractStage
from .merger import MergeStage
from .positions import PositionStage
from .sentences import SentenceStage

# Canonical execution order
STAGE_REGISTRY: dict[str, type[PipelineStage]] = {
    stage.name: stage
    for stage in (
        ExtractStage,
        MergeStage,
        DictionaryStage,
        SentenceStage,
        PositionStage,
        BigramStage,
    )
}

# Table key -> name of the stage that writes it
TABLE_PRODUCERS: dict[str, str] = {
    table: name for name, stage in STAGE_REGISTRY.items() for table in stage.produces
}

__all__ = [
    "PipelineStage",
    "StageContext",
    "ExtractStage",
    "MergeStage",
    "DictionaryStage",
    "SentenceStage",
    "PositionStage",
    "BigramStage",
    "STAGE_REGISTRY",
    "TABLE_PRODUCERS",
]
