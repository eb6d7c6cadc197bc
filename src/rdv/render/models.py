"""Render models - inputs and results."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path


@dataclass(frozen=True)
class RenderInput:
    """What to render: a source directory plus values files inside it."""

    root: Path
    value_files: tuple[Path, ...] = field(default_factory=tuple)

    @classmethod
    def at(cls, root: Path, value_names: list[str] | tuple[str, ...] = ()) -> RenderInput:
        """Input rooted at ``root`` with value files named relative to it."""
        return cls(root=root, value_files=tuple(root / name for name in value_names))


@dataclass(frozen=True)
class RenderResult:
    """Rendered manifests, or ``None`` when the source is absent at this revision."""

    input: RenderInput
    text: str | None

    @property
    def absent(self) -> bool:
        return self.text is None

    @property
    def text_or_empty(self) -> str:
        return self.text if self.text is not None else ""
