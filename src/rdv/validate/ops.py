"""Manifest validation against Kubernetes schemas via kubeconform."""

from __future__ import annotations

import json
import shutil
from dataclasses import dataclass
from typing import Any, Protocol, runtime_checkable

import yaml

from rdv.config.models import ValidateConfig
from rdv.core.errors import ValidationError
from rdv.core.logging import get_logger
from rdv.core.process import run_process

log = get_logger(__name__)

_STATUS_INVALID = "statusInvalid"
_STATUS_ERROR = "statusError"


@runtime_checkable
class Validator(Protocol):
    """Checks rendered manifests, raising ``ValidationError`` on problems."""

    async def validate(self, rendered: str) -> None: ...


@dataclass(frozen=True)
class ResourceProblem:
    """One resource kubeconform rejected."""

    index: int | None
    kind: str
    name: str
    status: str
    message: str

    @property
    def resource_id(self) -> str:
        where = f"Document {self.index}" if self.index is not None else "Document"
        if self.kind and self.name:
            return f"{where} (Kind: {self.kind}, Name: {self.name})"
        if self.kind:
            return f"{where} (Kind: {self.kind})"
        return where

    def describe(self) -> str:
        if self.status == _STATUS_ERROR:
            return f"  - Error processing {self.resource_id}:\n      {self.message}"
        return f"  - {self.resource_id} is invalid:\n      {self.message}"


def _document_signatures(rendered: str) -> list[tuple[str, str]]:
    """(kind, name) per non-empty document, in stream order."""
    signatures: list[tuple[str, str]] = []
    try:
        for doc in yaml.safe_load_all(rendered):
            if doc is None:
                continue
            if isinstance(doc, dict):
                metadata = doc.get("metadata") or {}
                name = metadata.get("name", "") if isinstance(metadata, dict) else ""
                signatures.append((str(doc.get("kind", "")), str(name)))
            else:
                signatures.append(("", ""))
    except yaml.YAMLError:
        # kubeconform reports the parse failure itself
        pass
    return signatures


def _resource_message(resource: dict[str, Any]) -> str:
    errors = resource.get("validationErrors") or []
    if errors:
        return "; ".join(
            f"{e['path']}: {e.get('msg', '')}" if e.get("path") else str(e.get("msg", ""))
            for e in errors
        )
    return str(resource.get("msg", "")).strip()


def parse_kubeconform_output(output: str, rendered: str) -> list[ResourceProblem]:
    """Extract invalid and errored resources from ``-output json``.

    Documents are numbered from 1 in stream order by matching kind and name
    against the rendered input.

    Raises:
        ValueError: If ``output`` is not kubeconform JSON
    """
    if not output.strip():
        return []
    data = json.loads(output)
    if not isinstance(data, dict):
        raise ValueError("expected a JSON object")

    signatures = _document_signatures(rendered)
    used: set[int] = set()
    problems: list[ResourceProblem] = []
    for resource in data.get("resources") or []:
        status = resource.get("status", "")
        if status not in (_STATUS_INVALID, _STATUS_ERROR):
            continue
        kind = str(resource.get("kind") or "")
        name = str(resource.get("name") or "")
        index = None
        for i, signature in enumerate(signatures):
            if i not in used and signature == (kind, name):
                used.add(i)
                index = i + 1
                break
        problems.append(
            ResourceProblem(
                index=index,
                kind=kind,
                name=name,
                status=status,
                message=_resource_message(resource),
            )
        )
    return problems


class KubeconformValidator:
    """Pipes manifests into ``kubeconform`` and collects every failure."""

    def __init__(self, config: ValidateConfig | None = None) -> None:
        self._config = config or ValidateConfig()

    def command(self, binary: str) -> list[str]:
        cmd = [binary, "-output", "json"]
        if self._config.strict:
            cmd.append("-strict")
        if self._config.skip_kinds:
            cmd.extend(["-skip", ",".join(self._config.skip_kinds)])
        if self._config.schema_locations:
            cmd.extend(["-schema-location", "default"])
            for location in self._config.schema_locations:
                cmd.extend(["-schema-location", location])
        cmd.append("-")
        return cmd

    async def validate(self, rendered: str) -> None:
        binary = shutil.which(self._config.kubeconform_binary)
        if binary is None:
            raise ValidationError.validator_failed(
                f"{self._config.kubeconform_binary} not found in PATH"
            )

        try:
            result = await run_process(
                self.command(binary),
                stdin_text=rendered,
                timeout=self._config.timeout_sec,
            )
        except TimeoutError as e:
            raise ValidationError.validator_failed(
                f"timed out after {self._config.timeout_sec}s"
            ) from e
        except OSError as e:
            raise ValidationError.validator_failed(str(e)) from e

        try:
            problems = parse_kubeconform_output(result.stdout, rendered)
        except ValueError as e:
            if result.ok:
                raise ValidationError.validator_failed(f"unreadable output: {e}") from e
            raise ValidationError.validator_failed(result.error_output) from e

        if problems:
            log.debug("validation_failed", problems=len(problems))
            raise ValidationError.invalid_manifests([p.describe() for p in problems])
        if not result.ok:
            raise ValidationError.validator_failed(result.error_output)
        log.debug("validation_passed")
