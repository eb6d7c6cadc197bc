"""Configuration constants.

This module contains truly constant values that should NOT be user-configurable.
For configurable values, see models.py.
"""

# =============================================================================
# Diff Limits
# =============================================================================

CONTEXT_LINES_MIN = 0
CONTEXT_LINES_MAX = 100
"""Valid range for unified diff context lines."""

# =============================================================================
# Snapshot
# =============================================================================

SNAPSHOT_DIR_PREFIX = "rdv-"
"""Prefix of the temporary directory holding the target revision worktree."""

# =============================================================================
# Render Sources
# =============================================================================

HELM_CHART_FILE = "Chart.yaml"
"""Presence marks a directory as a Helm chart."""

KUSTOMIZATION_FILES = ("kustomization.yaml", "kustomization.yml", "Kustomization")
"""Any of these marks a directory as a Kustomize overlay."""

# =============================================================================
# Reporting
# =============================================================================

NO_DIFFERENCES_MESSAGE = "No differences found between rendered manifests."
"""The only output when both renders are equivalent."""

LOCAL_LABEL_PREFIX = "local"
"""Label prefix of the working tree side in diff headers."""

TARGET_SIDE = "target"
"""Names the snapshot side in render failures."""
