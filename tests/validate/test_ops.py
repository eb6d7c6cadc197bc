"""Tests for kubeconform validation."""

from __future__ import annotations

import json
from collections.abc import Sequence
from pathlib import Path
from typing import Any

import pytest

from rdv.config.models import ValidateConfig
from rdv.core.errors import ValidationError
from rdv.core.process import ProcessResult
from rdv.validate import KubeconformValidator, Validator, parse_kubeconform_output

RENDERED = """\
apiVersion: v1
kind: Service
metadata:
  name: api
---
apiVersion: apps/v1
kind: Deployment
metadata:
  name: web
spec:
  replicas: "three"
---
apiVersion: apps/v1
kind: Deployment
metadata:
  name: worker
"""


def _output(*resources: dict[str, Any]) -> str:
    return json.dumps({"resources": list(resources), "summary": {}})


class TestParseKubeconformOutput:
    """Parsing of -output json."""

    def test_empty_output_has_no_problems(self) -> None:
        assert parse_kubeconform_output("", RENDERED) == []

    def test_valid_resources_ignored(self) -> None:
        output = _output({"kind": "Service", "name": "api", "status": "statusValid"})

        assert parse_kubeconform_output(output, RENDERED) == []

    def test_invalid_resource_numbered_by_position(self) -> None:
        output = _output(
            {
                "kind": "Deployment",
                "name": "web",
                "status": "statusInvalid",
                "msg": "problem validating schema",
                "validationErrors": [
                    {"path": "/spec/replicas", "msg": "expected integer, but got string"}
                ],
            }
        )

        (problem,) = parse_kubeconform_output(output, RENDERED)

        assert problem.index == 2
        assert problem.describe() == (
            "  - Document 2 (Kind: Deployment, Name: web) is invalid:\n"
            "      /spec/replicas: expected integer, but got string"
        )

    def test_error_status_described_as_processing_error(self) -> None:
        output = _output(
            {
                "kind": "Deployment",
                "name": "worker",
                "status": "statusError",
                "msg": "could not find schema for Deployment",
            }
        )

        (problem,) = parse_kubeconform_output(output, RENDERED)

        assert problem.describe() == (
            "  - Error processing Document 3 (Kind: Deployment, Name: worker):\n"
            "      could not find schema for Deployment"
        )

    def test_every_problem_reported(self) -> None:
        output = _output(
            {"kind": "Service", "name": "api", "status": "statusInvalid", "msg": "a"},
            {"kind": "Deployment", "name": "web", "status": "statusInvalid", "msg": "b"},
        )

        problems = parse_kubeconform_output(output, RENDERED)

        assert [p.index for p in problems] == [1, 2]

    def test_unmatched_resource_has_no_index(self) -> None:
        output = _output({"kind": "Widget", "status": "statusError", "msg": "unknown"})

        (problem,) = parse_kubeconform_output(output, RENDERED)

        assert problem.resource_id == "Document (Kind: Widget)"

    @pytest.mark.parametrize("output", ["not json", "[1, 2]"])
    def test_non_object_output_raises_value_error(self, output: str) -> None:
        with pytest.raises(ValueError):
            parse_kubeconform_output(output, RENDERED)


class TestCommand:
    """kubeconform argument construction."""

    def test_defaults(self) -> None:
        cmd = KubeconformValidator().command("/bin/kubeconform")

        assert cmd == [
            "/bin/kubeconform",
            "-output",
            "json",
            "-strict",
            "-skip",
            "CustomResourceDefinition",
            "-",
        ]

    def test_extra_schema_locations_keep_default_first(self) -> None:
        config = ValidateConfig(strict=False, skip_kinds=[], schema_locations=["/schemas"])

        cmd = KubeconformValidator(config).command("kubeconform")

        assert cmd == [
            "kubeconform",
            "-output",
            "json",
            "-schema-location",
            "default",
            "-schema-location",
            "/schemas",
            "-",
        ]


class FakeKubeconform:
    def __init__(self, result: ProcessResult | BaseException) -> None:
        self.result = result
        self.stdin: str | None = None

    async def __call__(
        self,
        cmd: Sequence[str],
        *,
        cwd: Path | None = None,
        stdin_text: str | None = None,
        timeout: float | None = None,
    ) -> ProcessResult:
        self.stdin = stdin_text
        if isinstance(self.result, BaseException):
            raise self.result
        return self.result


@pytest.fixture
def kubeconform_on_path(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr("rdv.validate.ops.shutil.which", lambda name: f"/bin/{name}")


def _install(monkeypatch: pytest.MonkeyPatch, fake: FakeKubeconform) -> FakeKubeconform:
    monkeypatch.setattr("rdv.validate.ops.run_process", fake)
    return fake


@pytest.mark.usefixtures("kubeconform_on_path")
class TestKubeconformValidator:
    """validate() outcomes with kubeconform faked."""

    def test_satisfies_validator_protocol(self) -> None:
        assert isinstance(KubeconformValidator(), Validator)

    async def test_clean_run_passes_and_pipes_manifests(
        self, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        fake = _install(monkeypatch, FakeKubeconform(ProcessResult([], 0, "", "")))

        await KubeconformValidator().validate(RENDERED)

        assert fake.stdin == RENDERED

    async def test_invalid_resources_raise_with_listing(
        self, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        output = _output(
            {"kind": "Deployment", "name": "web", "status": "statusInvalid", "msg": "bad"}
        )
        _install(monkeypatch, FakeKubeconform(ProcessResult([], 1, output, "")))

        with pytest.raises(ValidationError) as exc_info:
            await KubeconformValidator().validate(RENDERED)

        assert exc_info.value.message.startswith("manifest validation failed:\n")
        assert "Document 2 (Kind: Deployment, Name: web) is invalid" in exc_info.value.message

    async def test_crash_without_json_reports_stderr(self, monkeypatch: pytest.MonkeyPatch) -> None:
        result = ProcessResult([], 2, "", "flag provided but not defined")
        _install(monkeypatch, FakeKubeconform(result))

        with pytest.raises(ValidationError, match="flag provided but not defined"):
            await KubeconformValidator().validate(RENDERED)

    async def test_nonzero_exit_without_problems_fails(
        self, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        _install(monkeypatch, FakeKubeconform(ProcessResult([], 1, _output(), "schema fetch")))

        with pytest.raises(ValidationError, match="schema fetch"):
            await KubeconformValidator().validate(RENDERED)

    async def test_timeout_reported(self, monkeypatch: pytest.MonkeyPatch) -> None:
        _install(monkeypatch, FakeKubeconform(TimeoutError()))

        with pytest.raises(ValidationError, match="timed out after 2.0s"):
            await KubeconformValidator(ValidateConfig(timeout_sec=2)).validate(RENDERED)

    async def test_missing_binary(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr("rdv.validate.ops.shutil.which", lambda name: None)

        with pytest.raises(ValidationError, match="kubeconform not found in PATH"):
            await KubeconformValidator().validate(RENDERED)
