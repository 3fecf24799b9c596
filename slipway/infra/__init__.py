# -----------------------------------------------------------------------------
# INFRASTRUCTURE LAYER
# -----------------------------------------------------------------------------
# Contains low-level wrappers around external tools:
# - CommandRunner: direct or shimmed subprocess execution
# - DotnetToolchain: restore/build/publish
# - DockerCli: container and image operations via the docker CLI
# - DockerProvider: Docker SDK reachability probe with auto-wake
# -----------------------------------------------------------------------------

from .docker_cli import DockerCli
from .docker_client import DockerProvider, DockerProviderError
from .dotnet import DotnetToolchain
from .runner import CommandResult, CommandRunner, DirectRunner, ShimRunner, make_runner

__all__ = [
    "CommandResult", "CommandRunner", "DirectRunner", "ShimRunner", "make_runner",
    "DotnetToolchain", "DockerCli", "DockerProvider", "DockerProviderError",
]
