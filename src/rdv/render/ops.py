"""Render orchestration - local and target renders side by side."""

from __future__ import annotations

import asyncio

from rdv.config.constants import LOCAL_LABEL_PREFIX, TARGET_SIDE
from rdv.core.errors import RenderError, SourceNotFoundError
from rdv.core.logging import get_logger
from rdv.render.models import RenderInput, RenderResult
from rdv.render.tools import Renderer
from rdv.validate.ops import Validator

log = get_logger(__name__)


class RenderOrchestrator:
    """Renders the working tree and the target snapshot concurrently.

    Both renders always run to completion before any failure is reported, and
    the local failure wins when both sides fail. A target that is not a
    renderable source is treated as absent, so the whole local render shows
    up as added. Linting and validation, when configured, apply to the local
    render only.
    """

    def __init__(
        self, renderer: Renderer, validator: Validator | None = None, *, lint: bool = False
    ) -> None:
        self._renderer = renderer
        self._validator = validator
        self._lint = lint

    async def render_both(
        self, local: RenderInput, target: RenderInput
    ) -> tuple[RenderResult, RenderResult]:
        """Render both inputs.

        Returns:
            (local_result, target_result)

        Raises:
            RenderError: If the local render fails, or the target render fails
                for any reason other than the source being absent
            ValidationError: If the local render does not validate
        """
        local_outcome, target_outcome = await asyncio.gather(
            self._render_local(local),
            self._render_target(target),
            return_exceptions=True,
        )
        if isinstance(local_outcome, BaseException):
            log.debug("local_render_failed", error=str(local_outcome))
            raise local_outcome
        if isinstance(target_outcome, BaseException):
            log.debug("target_render_failed", error=str(target_outcome))
            raise target_outcome
        return local_outcome, target_outcome

    async def _render_local(self, local: RenderInput) -> RenderResult:
        try:
            text = await self._renderer.render(local.root, local.value_files, lint=self._lint)
        except SourceNotFoundError:
            raise
        except RenderError as e:
            raise e.on_side(LOCAL_LABEL_PREFIX) from e
        log.debug("local_rendered", path=str(local.root), size=len(text))
        if self._validator is not None:
            await self._validator.validate(text)
        return RenderResult(input=local, text=text)

    async def _render_target(self, target: RenderInput) -> RenderResult:
        try:
            text = await self._renderer.render(target.root, target.value_files, lint=False)
        except SourceNotFoundError:
            log.info("target_source_absent", path=str(target.root))
            return RenderResult(input=target, text=None)
        except RenderError as e:
            raise e.on_side(TARGET_SIDE) from e
        log.debug("target_rendered", path=str(target.root), size=len(text))
        return RenderResult(input=target, text=text)
