"""
Pytest configuration and fixtures for Slipway tests.
"""

import os
import sys
from pathlib import Path

import pytest

# Add project root to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

# Keep a developer's local settings out of the tests
for _key in [k for k in os.environ if k.startswith("SLIPWAY_")]:
    del os.environ[_key]

from slipway.core.config import Settings  # noqa: E402
from slipway.domain.errors import ExternalToolError  # noqa: E402
from slipway.domain.models import PipelineOptions  # noqa: E402


class FakeEngine:
    """
    In-memory container engine.

    Tracks running/exited containers and images by name and records every
    call in order, so tests can assert on the exact action sequence.
    """

    def __init__(self, running=(), exited=(), images=(), fail_on=None):
        self.running = set(running)
        self.exited = set(exited)
        self.images = set(images)
        self.fail_on = fail_on
        self.calls: list[tuple] = []

    def _record(self, *call):
        self.calls.append(call)
        if self.fail_on == call[0]:
            raise ExternalToolError(f"docker {call[0]} failed", operation=call[0], exit_code=1)

    @staticmethod
    def _image_name(ref: str) -> str:
        return ref.rsplit(":", 1)[0]

    @property
    def actions(self) -> list[str]:
        """Names of mutating calls only."""
        queries = {"list-running", "list-exited", "list-images", "engine"}
        return [c[0] for c in self.calls if c[0] not in queries]

    def list_running_names(self):
        self._record("list-running")
        return sorted(self.running)

    def list_exited_names(self):
        self._record("list-exited")
        return sorted(self.exited)

    def list_image_ids(self, name):
        self._record("list-images", name)
        return ["sha256:abc"] if self._image_name(name) in self.images else []

    def engine_version(self):
        self._record("engine")
        return "27.0.3"

    def stop(self, name):
        self._record("stop", name)
        self.running.discard(name)
        self.exited.add(name)

    def remove_container(self, name):
        self._record("remove", name)
        self.exited.discard(name)

    def remove_image(self, name, force=False):
        self._record("remove-image", name, force)
        self.images.discard(self._image_name(name))

    def build_image(self, descriptor, context, tag):
        self._record("build-image", tag)
        self.images.add(self._image_name(tag))

    def pull(self, image_ref):
        self._record("pull", image_ref)

    def run(self, name, image_ref, host_port, container_port, env=None):
        self._record("run", name, image_ref, host_port, container_port, dict(env or {}))
        self.running.add(name)
        return "c0ffee"


@pytest.fixture
def fake_engine():
    """An engine with no containers and no images."""
    return FakeEngine()


@pytest.fixture
def settings():
    """Settings that never touch a real Docker daemon."""
    return Settings(probe_engine=False)


@pytest.fixture
def project_dir(tmp_path):
    """A minimal project: <tmp>/src/MyApi/MyApi.csproj."""
    project = tmp_path / "src" / "MyApi"
    project.mkdir(parents=True)
    (project / "MyApi.csproj").write_text("<Project Sdk=\"Microsoft.NET.Sdk.Web\" />")
    return project


@pytest.fixture
def options(project_dir):
    """Valid options for the fixture project."""
    return PipelineOptions(project_path=str(project_dir), name="myapi", port=5000)
