"""Render-and-diff pipeline."""

from rdv.pipeline.models import PipelineOptions, PipelineResult
from rdv.pipeline.ops import run_pipeline

__all__ = ["PipelineOptions", "PipelineResult", "run_pipeline"]
