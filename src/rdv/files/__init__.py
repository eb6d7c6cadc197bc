"""Path resolution for render sources."""

from rdv.files.ops import ResolvedPath, resolve_render_path

__all__ = ["ResolvedPath", "resolve_render_path"]
