# -----------------------------------------------------------------------------
# DOMAIN LAYER
# -----------------------------------------------------------------------------
# Contains the run options, workspace layout, resource handles and the
# error taxonomy shared by the core and infrastructure layers.
# -----------------------------------------------------------------------------

from .errors import ExternalToolError, PipelineIOError, SlipwayError, ValidationError
from .models import (
    ContainerHandle,
    ContainerState,
    ImageHandle,
    ImageState,
    PipelineOptions,
    WorkspaceLayout,
)

__all__ = [
    "SlipwayError", "ValidationError", "ExternalToolError", "PipelineIOError",
    "ContainerHandle", "ContainerState", "ImageHandle", "ImageState",
    "PipelineOptions", "WorkspaceLayout",
]
