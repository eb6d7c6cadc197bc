"""Pydantic configuration models with env var support.

Configuration Hierarchy (highest to lowest precedence):
1. Direct kwargs to load_config() (CLI flags)
2. Environment variables (RDV__SECTION__KEY)
3. Repo YAML (<repo>/.rdv.yaml)
4. Global YAML (~/.config/rdv/config.yaml)
5. Built-in defaults (this file)

Environment Variable Format:
    RDV__<SECTION>__<KEY>=<VALUE>

Examples:
    RDV__LOGGING__LEVEL=DEBUG
    RDV__RENDER__HELM_BINARY=/opt/helm/bin/helm
    RDV__DIFF__CONTEXT_LINES=5
"""

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field, field_validator

from rdv.config.constants import CONTEXT_LINES_MAX, CONTEXT_LINES_MIN

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class LogOutputConfig(BaseModel):
    """Single logging output configuration.

    Env vars: Not directly configurable via env (use YAML for multi-output).
    """

    format: Literal["json", "console"] = "console"
    destination: str = "stderr"  # stderr, stdout, or absolute file path
    level: LogLevel | None = None  # Inherits from parent if None

    @field_validator("destination")
    @classmethod
    def validate_destination(cls, v: str) -> str:
        if v in ("stderr", "stdout"):
            return v
        path = Path(v).expanduser()
        if not path.is_absolute():
            raise ValueError(f"File destination must be absolute path: {v}")
        return str(path)


class LoggingConfig(BaseModel):
    """Logging configuration.

    Env vars:
        RDV__LOGGING__LEVEL: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    """

    level: LogLevel = Field(
        default="INFO",
        description="Root log level. --debug forces DEBUG.",
    )
    outputs: list[LogOutputConfig] = Field(default_factory=lambda: [LogOutputConfig()])


class RenderConfig(BaseModel):
    """Renderer configuration.

    Env vars:
        RDV__RENDER__HELM_BINARY: helm executable
        RDV__RENDER__KUSTOMIZE_BINARY: kustomize executable
        RDV__RENDER__UPDATE_DEPENDENCIES: run 'helm dependency update' before rendering
        RDV__RENDER__LINT: run 'helm lint' on the local chart
    """

    helm_binary: str = "helm"
    kustomize_binary: str = "kustomize"
    kubectl_binary: str = Field(
        default="kubectl",
        description="Used for 'kubectl kustomize' when the kustomize binary is missing.",
    )
    release_name: str = Field(
        default="release",
        description="Release name passed to 'helm template'. Not a real release.",
    )
    namespace: str = "default"
    update_dependencies: bool = Field(
        default=False,
        description="Update Helm chart dependencies. Required if the lockfile does not "
        "match the declared dependencies.",
    )
    lint: bool = Field(
        default=True,
        description="Run 'helm lint' on the local chart before rendering it. The target "
        "ref is never linted.",
    )
    timeout_sec: float | None = Field(
        default=None,
        description="Kill a renderer process after this many seconds. Unset means no limit.",
    )

    @field_validator("timeout_sec")
    @classmethod
    def validate_timeout(cls, v: float | None) -> float | None:
        if v is not None and v <= 0:
            raise ValueError(f"Timeout must be positive, got {v}")
        return v


class ValidateConfig(BaseModel):
    """Manifest validation configuration (kubeconform).

    Env vars:
        RDV__VALIDATION__KUBECONFORM_BINARY: kubeconform executable
        RDV__VALIDATION__STRICT: reject unknown fields
    """

    kubeconform_binary: str = "kubeconform"
    strict: bool = True
    skip_kinds: list[str] = Field(default_factory=lambda: ["CustomResourceDefinition"])
    schema_locations: list[str] = Field(
        default_factory=list,
        description="Extra -schema-location values. The default kubeconform location "
        "is always included first.",
    )
    timeout_sec: float | None = None


class DiffConfig(BaseModel):
    """Diff configuration.

    Env vars:
        RDV__DIFF__CONTEXT_LINES: context lines around unified diff hunks
        RDV__DIFF__SEMANTIC: use the semantic diff by default
        RDV__DIFF__DEFAULT_REF: target ref when --ref is not given
    """

    context_lines: int = Field(default=3, description="Unchanged lines around each hunk.")
    semantic: bool = False
    default_ref: str = "main"
    track_upstream: bool = Field(
        default=True,
        description="Compare against the remote-tracking branch of the target ref when "
        "one is configured (e.g. 'main' -> 'origin/main').",
    )

    @field_validator("context_lines")
    @classmethod
    def validate_context_lines(cls, v: int) -> int:
        if not (CONTEXT_LINES_MIN <= v <= CONTEXT_LINES_MAX):
            raise ValueError(
                f"Context lines must be {CONTEXT_LINES_MIN}-{CONTEXT_LINES_MAX}, got {v}"
            )
        return v


class RdvConfig(BaseModel):
    """Root configuration."""

    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    render: RenderConfig = Field(default_factory=RenderConfig)
    validation: ValidateConfig = Field(default_factory=ValidateConfig)
    diff: DiffConfig = Field(default_factory=DiffConfig)
