# -----------------------------------------------------------------------------
# SLIPWAY
# -----------------------------------------------------------------------------
# Build, publish and launch a .NET web project as a named Docker container.
#
# Layers:
# - domain: options, layout, resource handles, errors
# - core: reconcilers, descriptor, pipeline
# - infra: dotnet/docker wrappers and the command runner
# -----------------------------------------------------------------------------

__version__ = "1.0.0"
