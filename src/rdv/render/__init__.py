"""Manifest rendering."""

from rdv.render.models import RenderInput, RenderResult
from rdv.render.ops import RenderOrchestrator
from rdv.render.tools import HelmRenderer, KustomizeRenderer, Renderer, SourceRenderer

__all__ = [
    "HelmRenderer",
    "KustomizeRenderer",
    "RenderInput",
    "RenderOrchestrator",
    "RenderResult",
    "Renderer",
    "SourceRenderer",
]
