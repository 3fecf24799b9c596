# -----------------------------------------------------------------------------
# CORE LAYER
# -----------------------------------------------------------------------------
# The business logic of a Slipway run:
# - Settings: per-machine tool configuration
# - Artifact reconciler: fill gaps in the publish output
# - Descriptor: the generated Dockerfile
# - ResourceReconciler: idempotent container/image replacement
# - Pipeline: the fixed, fail-fast step sequence
# -----------------------------------------------------------------------------

from .artifacts import list_artifacts, missing_artifacts, reconcile_artifacts
from .config import Settings, load_settings
from .descriptor import base_image_ref, render_descriptor, write_descriptor
from .lifecycle import ContainerEngine, ResourceReconciler
from .pipeline import STEPS, Pipeline, PipelineResult, resolve_layout

__all__ = [
    "Settings", "load_settings",
    "list_artifacts", "missing_artifacts", "reconcile_artifacts",
    "base_image_ref", "render_descriptor", "write_descriptor",
    "ContainerEngine", "ResourceReconciler",
    "STEPS", "Pipeline", "PipelineResult", "resolve_layout",
]
