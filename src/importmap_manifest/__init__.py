from __future__ import annotations

from importmap_manifest.aggregation import AggregationError, AggregationState, PassToken
from importmap_manifest.config import ImportMapOptions
from importmap_manifest.diagnostics import Diagnostic, Outcome
from importmap_manifest.emit import DirectorySink, MemorySink, OutputSink
from importmap_manifest.pipeline import ImportMapPipeline, PassResult
from importmap_manifest.records import ArtifactRecord, AssetInfo, BuildPassInput, BuildUnit

__all__ = [
    "AggregationError",
    "AggregationState",
    "ArtifactRecord",
    "AssetInfo",
    "BuildPassInput",
    "BuildUnit",
    "Diagnostic",
    "DirectorySink",
    "ImportMapOptions",
    "ImportMapPipeline",
    "MemorySink",
    "Outcome",
    "OutputSink",
    "PassResult",
    "PassToken",
]
