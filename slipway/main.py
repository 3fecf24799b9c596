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
# SLIPWAY - COMMAND LINE INTERFACE
# -----------------------------------------------------------------------------
# Responsibility: Turn `name=value` parameters into PipelineOptions and run
# the pipeline, reporting the outcome in one line.
#
# Usage:
#   slipway projectPath=C:\src\MyApi name=myapi port=5000
#   slipway projectPath=/src/MyApi name=myapi port=5000 version=8.0 plainLog=true
#
# Exit codes:
#   0 - container running
#   1 - a pipeline step failed
#   2 - invalid parameters (nothing was run)
# -----------------------------------------------------------------------------

import argparse
import sys
from pathlib import Path

from dotenv import load_dotenv
from pydantic import ValidationError as PydanticValidationError
from rich.console import Console
from rich.panel import Panel

from slipway.core.config import load_settings
from slipway.core.pipeline import Pipeline
from slipway.domain.errors import ExternalToolError, PipelineIOError, SlipwayError, ValidationError
from slipway.domain.models import PipelineOptions

console = Console()

EXIT_OK = 0
EXIT_FAILED = 1
EXIT_INVALID = 2

# Accepted parameter names (lowercased) -> PipelineOptions field
PARAM_ALIASES = {
    "projectpath": "project_path",
    "project_path": "project_path",
    "path": "project_path",
    "name": "name",
    "imagename": "name",
    "port": "port",
    "externalport": "port",
    "ext": "project_extension",
    "extension": "project_extension",
    "projectextension": "project_extension",
    "version": "framework",
    "framework": "framework",
    "plainlog": "plain_console_log",
    "simplelog": "plain_console_log",
    "plain_console_log": "plain_console_log",
    "wsl": "use_shim",
    "shim": "use_shim",
    "use_shim": "use_shim",
}

REQUIRED = ("project_path", "name", "port")

USAGE = """\
Build, publish and containerize a .NET web project, replacing any previous
container and image of the same name.

parameters (name=value):
  projectPath=<abs path>   project directory (required)
  name=<name>              container and image name (required)
  port=<port>              host port mapped to the app (required)
  ext=<.csproj>            project file extension
  version=<8.0>            runtime version / target framework
  plainLog=<true|false>    plain-text console logs inside the container
  wsl=<true|false>         run docker commands through WSL
"""


def parse_params(tokens: list[str]) -> dict[str, str]:
    """
    Map `name=value` tokens onto PipelineOptions field names.

    Raises:
        ValidationError: On malformed tokens, unknown or repeated names,
            or a missing required parameter.
    """
    params: dict[str, str] = {}
    for token in tokens:
        key, sep, value = token.partition("=")
        if not sep or not key.strip():
            raise ValidationError(f"Expected name=value, got '{token}'")
        field_name = PARAM_ALIASES.get(key.strip().lower())
        if field_name is None:
            raise ValidationError(f"Unknown parameter '{key}'")
        if field_name in params:
            raise ValidationError(f"Parameter given twice: '{key}'")
        params[field_name] = value.strip()

    missing = [f for f in REQUIRED if not params.get(f)]
    if missing:
        raise ValidationError(f"Missing required parameter(s): {', '.join(missing)}")
    return params


def build_options(tokens: list[str]) -> PipelineOptions:
    params = parse_params(tokens)
    try:
        return PipelineOptions(**params)
    except PydanticValidationError as e:
        first = e.errors()[0]
        where = ".".join(str(p) for p in first.get("loc", ())) or "parameters"
        raise ValidationError(f"Invalid {where}: {first.get('msg')}")


def _halt(message: str) -> None:
    console.print(Panel(f"[bold red]{message}[/bold red]", title="PIPELINE HALT", border_style="red"))


def _describe(error: SlipwayError) -> str:
    if isinstance(error, ExternalToolError):
        return f"Stage '{error.operation}' failed: {error}"
    if isinstance(error, PipelineIOError):
        return f"File operation failed at {error.path}: {error}"
    return str(error)


def main(argv: list[str] | None = None) -> int:
    load_dotenv(Path.cwd() / ".env")

    parser = argparse.ArgumentParser(
        prog="slipway",
        description=USAGE,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("params", nargs="*", metavar="name=value")
    args = parser.parse_args(argv)

    try:
        options = build_options(args.params)
        settings = load_settings()
        pipeline = Pipeline(options, settings)
        layout = pipeline.validate()
    except ValidationError as e:
        _halt(str(e))
        return EXIT_INVALID

    try:
        pipeline.run(layout)
    except SlipwayError as e:
        _halt(_describe(e))
        return EXIT_FAILED

    return EXIT_OK


if __name__ == "__main__":
    raise SystemExit(main(sys.argv[1:]))
