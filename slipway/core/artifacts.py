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
# ARTIFACT RECONCILER
# -----------------------------------------------------------------------------
# Responsibility: Make the publish output a superset of the build output's
# libraries. `dotnet publish` trims what it thinks is unused; anything the
# build produced that publish left out is copied over.
#
# Files already in the publish directory are never touched: publish may have
# placed a runtime-specific version there on purpose.
# -----------------------------------------------------------------------------

import shutil
from pathlib import Path
from typing import Iterable

from rich.console import Console

from slipway.domain.errors import PipelineIOError

console = Console()

DEFAULT_EXTENSION = ".dll"


def list_artifacts(directory: Path, extension: str = DEFAULT_EXTENSION) -> list[str]:
    """
    List artifact file names directly inside a directory.

    Non-recursive, names only, exact (case-sensitive) suffix match.

    Raises:
        PipelineIOError: If the directory is missing or unreadable.
    """
    try:
        names = [
            entry.name
            for entry in directory.iterdir()
            if entry.is_file() and entry.name.endswith(extension)
        ]
    except OSError as e:
        raise PipelineIOError(f"Cannot list artifacts in {directory}: {e}", path=str(directory))
    return sorted(names)


def missing_artifacts(source: Iterable[str], target: Iterable[str]) -> list[str]:
    """
    Names in source that do not appear in target.

    Order follows source; a name listed twice in source is reported once.
    """
    present = set(target)
    missing: list[str] = []
    for name in source:
        if name not in present:
            missing.append(name)
            present.add(name)
    return missing


def reconcile_artifacts(
    source_dir: Path, target_dir: Path, extension: str = DEFAULT_EXTENSION
) -> list[str]:
    """
    Copy every artifact the target directory lacks from the source directory.

    Args:
        source_dir: Full build output
        target_dir: Publish output
        extension: Artifact suffix to compare

    Returns:
        Names that were copied (empty when target already covers source).

    Raises:
        PipelineIOError: On the first read/write failure. Files copied before
            the failure stay in place.
    """
    missing = missing_artifacts(list_artifacts(source_dir, extension), list_artifacts(target_dir, extension))

    if not missing:
        console.print("[green][ARTIFACTS] Publish output already complete[/green]")
        return []

    console.print(f"[cyan][ARTIFACTS] Copying {len(missing)} missing artifact(s)[/cyan]")
    for name in missing:
        source, destination = source_dir / name, target_dir / name
        try:
            shutil.copyfile(source, destination)
        except OSError as e:
            # Blame the side the OS names; the write side when it names neither
            failed = source if e.filename is not None and str(e.filename) == str(source) else destination
            console.print(f"[red][ARTIFACTS] Copy failed: {name}[/red]")
            raise PipelineIOError(f"Cannot copy {name} to {target_dir}: {e}", path=str(failed))
        console.print(f"[dim]  + {name}[/dim]")

    return missing
