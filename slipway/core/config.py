# Copyright 2026 Pramod Kumar Voola
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

# -----------------------------------------------------------------------------
# MACHINE SETTINGS
# -----------------------------------------------------------------------------
# Responsibility: Load the per-machine tool settings (which dotnet/docker to
# call, which base image repository to use, timeouts).
#
# Precedence (lowest to highest):
# 1. Defaults below
# 2. slipway.yaml (or the file named by SLIPWAY_CONFIG)
# 3. SLIPWAY_* environment variables
# -----------------------------------------------------------------------------

import os
from pathlib import Path
from typing import List

import yaml
from pydantic import BaseModel, Field
from pydantic import ValidationError as PydanticValidationError
from rich.console import Console

from slipway.domain.errors import ValidationError

console = Console()

CONFIG_FILENAME = "slipway.yaml"
ENV_PREFIX = "SLIPWAY_"


class Settings(BaseModel):
    """
    Pydantic model for the tool settings.

    Loaded once at startup; every component receives the same instance.
    """

    dotnet_bin: str = "dotnet"
    docker_bin: str = "docker"
    shim_prefix: List[str] = Field(default_factory=lambda: ["wsl"], min_length=1)
    base_image_repo: str = "mcr.microsoft.com/dotnet/aspnet"
    artifact_extension: str = ".dll"
    work_dir_prefix: str = "docker-"
    internal_port: int = Field(8080, ge=1, le=65535)
    command_timeout: int = Field(600, gt=0)
    force_image_removal: bool = False
    probe_engine: bool = True
    auto_wake: bool = False


def _config_path() -> Path:
    return Path(os.getenv(f"{ENV_PREFIX}CONFIG", CONFIG_FILENAME))


def _env_overrides() -> dict:
    """Collect SLIPWAY_<FIELD> variables for known settings fields."""
    overrides: dict = {}
    for field_name in Settings.model_fields:
        raw = os.getenv(f"{ENV_PREFIX}{field_name.upper()}")
        if raw is None:
            continue
        if field_name == "shim_prefix":
            overrides[field_name] = raw.split()
        else:
            # Pydantic coerces "true"/"600" into the declared types
            overrides[field_name] = raw
    return overrides


def load_settings(config_path: Path | None = None) -> Settings:
    """
    Load settings from YAML and environment.

    Args:
        config_path: Explicit YAML path. Defaults to SLIPWAY_CONFIG or ./slipway.yaml.

    Returns:
        Validated Settings.

    Raises:
        ValidationError: If the file is unreadable, malformed, not a mapping,
            or any value fails validation.
    """
    path = config_path or _config_path()
    data: dict = {}

    if path.exists():
        try:
            with open(path) as f:
                loaded = yaml.safe_load(f)
        except OSError as e:
            raise ValidationError(f"Cannot read settings file {path}: {e}")
        except yaml.YAMLError as e:
            first_line = str(e).splitlines()[0] if str(e) else type(e).__name__
            raise ValidationError(f"Malformed settings file {path}: {first_line}")

        if loaded is None:
            loaded = {}
        if not isinstance(loaded, dict):
            raise ValidationError(
                f"Settings file {path} must be a mapping of setting: value, got {type(loaded).__name__}"
            )
        data = loaded
        console.print(f"[cyan][CONFIG] Loaded settings from {path}[/cyan]")

    data.update(_env_overrides())
    try:
        return Settings(**data)
    except PydanticValidationError as e:
        first = e.errors()[0]
        where = ".".join(str(p) for p in first.get("loc", ())) or "settings"
        raise ValidationError(f"Invalid setting {where}: {first.get('msg')}")
