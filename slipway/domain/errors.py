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
# ERROR TAXONOMY
# -----------------------------------------------------------------------------
# Every failure is fatal. Three kinds:
# - ValidationError: bad parameters, detected before any step runs
# - ExternalToolError: dotnet/docker returned non-zero (or could not start)
# - PipelineIOError: listing, copying or writing files failed
# -----------------------------------------------------------------------------


class SlipwayError(Exception):
    """Base class for all pipeline failures."""

    pass


class ValidationError(SlipwayError):
    """Raised when a parameter is missing, malformed or points nowhere."""

    pass


class ExternalToolError(SlipwayError):
    """Raised when an external tool invocation fails."""

    def __init__(self, message: str, operation: str, exit_code: int | None = None, output: str = "") -> None:
        super().__init__(message)
        self.operation = operation
        self.exit_code = exit_code
        self.output = output


class PipelineIOError(SlipwayError):
    """Raised when a filesystem operation fails."""

    def __init__(self, message: str, path: str) -> None:
        super().__init__(message)
        self.path = path
