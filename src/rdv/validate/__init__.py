"""Manifest validation."""

from rdv.validate.ops import (
    KubeconformValidator,
    ResourceProblem,
    Validator,
    parse_kubeconform_output,
)

__all__ = ["KubeconformValidator", "ResourceProblem", "Validator", "parse_kubeconform_output"]
