"""
Rendering Context

Responsibilities:
- Holds a project's compiler configuration
- Reads and writes compiler.toml
- Runs the LaTeX compiler and removes intermediate files

Owns: compiler configuration, compiler invocation, artifact cleanup
Never: Creates project directories or edits .tex sources
"""

from texcreate.contexts.rendering.compiler_config import CompilerConfig, CompilerMode
from texcreate.contexts.rendering.exceptions import (
    CleanupError,
    CompilerExecutionError,
    CompilerStartError,
    CompilerTimeoutError,
    ConfigFileError,
    ConfigParseError,
    TexCreateError,
)
from texcreate.contexts.rendering.reporter import ConsoleReporter, RecordingReporter, Reporter

__all__ = [
    "CleanupError",
    "CompilerConfig",
    "CompilerExecutionError",
    "CompilerMode",
    "CompilerStartError",
    "CompilerTimeoutError",
    "ConfigFileError",
    "ConfigParseError",
    "ConsoleReporter",
    "RecordingReporter",
    "Reporter",
    "TexCreateError",
]
