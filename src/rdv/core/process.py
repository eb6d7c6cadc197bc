"""Async subprocess execution for external tools (helm, kustomize, kubeconform)."""

from __future__ import annotations

import asyncio
import contextlib
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path

from rdv.core.formatting import first_line, truncate_line
from rdv.core.logging import get_logger

log = get_logger(__name__)


@dataclass(frozen=True)
class ProcessResult:
    """Captured outcome of a finished process."""

    command: list[str]
    returncode: int
    stdout: str
    stderr: str

    @property
    def ok(self) -> bool:
        return self.returncode == 0

    @property
    def error_output(self) -> str:
        """Best diagnostic text: stderr, else stdout."""
        return (self.stderr or self.stdout).strip()


async def _terminate(proc: asyncio.subprocess.Process) -> None:
    if proc.returncode is None:
        with contextlib.suppress(ProcessLookupError):
            proc.kill()
    await proc.wait()


async def run_process(
    cmd: Sequence[str],
    *,
    cwd: Path | None = None,
    stdin_text: str | None = None,
    timeout: float | None = None,
) -> ProcessResult:
    """Run ``cmd`` to completion and capture its output.

    The process is killed and reaped before a cancellation or timeout
    propagates, so nothing outlives the caller's task.

    Raises:
        OSError: If the executable cannot be started
        TimeoutError: If ``timeout`` elapses first
    """
    command = list(cmd)
    log.debug("process_started", command=command, cwd=str(cwd) if cwd else None)
    proc = await asyncio.create_subprocess_exec(
        *command,
        stdin=asyncio.subprocess.PIPE if stdin_text is not None else asyncio.subprocess.DEVNULL,
        stdout=asyncio.subprocess.PIPE,
        stderr=asyncio.subprocess.PIPE,
        cwd=cwd,
    )
    payload = stdin_text.encode() if stdin_text is not None else None
    try:
        stdout_bytes, stderr_bytes = await asyncio.wait_for(proc.communicate(payload), timeout)
    except BaseException:
        await _terminate(proc)
        log.debug("process_killed", command=command)
        raise

    result = ProcessResult(
        command=command,
        returncode=proc.returncode if proc.returncode is not None else -1,
        stdout=stdout_bytes.decode(errors="replace"),
        stderr=stderr_bytes.decode(errors="replace"),
    )
    log.debug(
        "process_finished",
        command=command,
        returncode=result.returncode,
        stderr=truncate_line(first_line(result.stderr)),
    )
    return result
