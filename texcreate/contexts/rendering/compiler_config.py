"""
Compiler Configuration Module

Holds a project's LaTeX build configuration, persists it as compiler.toml and
runs the configured compiler with it.

The configuration file always lives in the project directory:
    persist(root)        writes <root>/<project_name>/compiler.toml
    load(project_dir)    reads  <project_dir>/compiler.toml
    compile(project_dir) runs the compiler inside project_dir, writing to out/
"""

import subprocess
import time
import tomllib
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import List, Optional, Tuple, Union

import tomli_w

from texcreate.contexts.rendering.exceptions import (
    CleanupError,
    CompilerExecutionError,
    CompilerStartError,
    CompilerTimeoutError,
    ConfigFileError,
    ConfigParseError,
)
from texcreate.contexts.rendering.logger import (
    _log_debug,
    _log_error,
    _log_success,
    _log_warning,
    log_compilation_result,
    log_compilation_start,
)
from texcreate.contexts.rendering.reporter import ConsoleReporter, Reporter
from texcreate.utils.settings import DEFAULT_COMPILER

CONFIG_FILENAME = "compiler.toml"
OUTPUT_DIR = "out"

# Intermediate files removed when clean is enabled
CLEANED_ARTIFACTS = [".aux", ".log"]

# On-disk field order
CONFIG_FIELDS = ["compiler", "proj_name", "flags", "clean", "mode"]

PathLike = Union[str, Path]


class CompilerMode(Enum):
    """How the compiler's own console output is handled."""

    SPAWN = "Spawn"  # inherit stdin/stdout/stderr, visible to the user
    OUTPUT = "Output"  # no stdin, capture and discard stdout/stderr


@dataclass
class CompilerConfig:
    """
    Build configuration of a single LaTeX project.

    Attributes:
        project_name: Project directory name and base name of the .tex file
        compiler: LaTeX compiler executable (name or path)
        flags: Extra compiler arguments, passed in order before the project name
        clean: Remove the .aux and .log files from out/ after compiling
        mode: Whether the compiler runs with inherited (SPAWN) or captured (OUTPUT) streams
    """

    project_name: str
    compiler: str = DEFAULT_COMPILER
    flags: List[str] = field(default_factory=list)
    clean: bool = True
    mode: CompilerMode = CompilerMode.OUTPUT

    @classmethod
    def new(cls, project_name: str) -> "CompilerConfig":
        """Default configuration for a project."""
        return cls(project_name=project_name)

    # Persistence

    @classmethod
    def load(cls, project_dir: PathLike = ".") -> "CompilerConfig":
        """
        Read compiler.toml from a project directory.

        Args:
            project_dir: Directory containing compiler.toml (default: current directory)

        Returns:
            The parsed configuration

        Raises:
            ConfigFileError: The file is missing or unreadable
            ConfigParseError: The file is not valid TOML or does not match the schema
        """
        path = Path(project_dir) / CONFIG_FILENAME
        try:
            text = path.read_text(encoding="utf-8")
        except UnicodeDecodeError as e:
            _log_error(f"Configuration is not valid UTF-8: {path}")
            raise ConfigParseError(f"Configuration is not valid UTF-8: {e}", path=path) from e
        except OSError as e:
            _log_error(f"Could not read configuration: {path}")
            raise ConfigFileError("Could not read compiler configuration", path, e) from e

        try:
            config = cls.from_toml(text, source=path)
        except ConfigParseError as e:
            _log_error(f"Invalid configuration in {path}: {e.message}")
            raise

        _log_debug(f"Loaded configuration from {path}")
        return config

    @classmethod
    def from_toml(cls, text: str, source: Optional[Path] = None) -> "CompilerConfig":
        """
        Parse and validate configuration text.

        Every field is required and unknown fields are rejected; nothing is
        silently defaulted.

        Raises:
            ConfigParseError: Malformed TOML, missing/unknown/mistyped field or unknown mode
        """
        try:
            data = tomllib.loads(text)
        except tomllib.TOMLDecodeError as e:
            raise ConfigParseError(f"Malformed TOML: {e}", path=source) from e

        missing = [name for name in CONFIG_FIELDS if name not in data]
        if missing:
            raise ConfigParseError(
                f"Missing field(s): {', '.join(missing)}", path=source, field=missing[0]
            )
        unknown = sorted(set(data) - set(CONFIG_FIELDS))
        if unknown:
            raise ConfigParseError(
                f"Unknown field(s): {', '.join(unknown)}", path=source, field=unknown[0]
            )

        for name in ("compiler", "proj_name", "mode"):
            if not isinstance(data[name], str):
                raise ConfigParseError(
                    f"Expected a string, got {type(data[name]).__name__}", path=source, field=name
                )

        flags = data["flags"]
        if not isinstance(flags, list) or not all(isinstance(flag, str) for flag in flags):
            raise ConfigParseError("Expected a list of strings", path=source, field="flags")

        # bool is checked explicitly; TOML integers are not accepted as booleans
        if not isinstance(data["clean"], bool):
            raise ConfigParseError(
                f"Expected a boolean, got {type(data['clean']).__name__}", path=source, field="clean"
            )

        try:
            mode = CompilerMode(data["mode"])
        except ValueError as e:
            valid = ", ".join(f'"{m.value}"' for m in CompilerMode)
            raise ConfigParseError(
                f"Unknown mode {data['mode']!r} (expected one of {valid})", path=source, field="mode"
            ) from e

        return cls(
            project_name=data["proj_name"],
            compiler=data["compiler"],
            flags=list(flags),
            clean=data["clean"],
            mode=mode,
        )

    def to_dict(self) -> dict:
        """On-disk representation, in file field order."""
        return {
            "compiler": self.compiler,
            "proj_name": self.project_name,
            "flags": list(self.flags),
            "clean": self.clean,
            "mode": self.mode.value,
        }

    def serialize(self) -> str:
        """Render the configuration as TOML."""
        return tomli_w.dumps(self.to_dict())

    def config_path(self, root: PathLike = ".") -> Path:
        """Location persist() writes to."""
        return Path(root) / self.project_name / CONFIG_FILENAME

    def persist(self, root: PathLike = ".") -> Path:
        """
        Write compiler.toml into the project directory.

        The project directory (<root>/<project_name>) must already exist; it is
        not created. An existing file is overwritten.

        Args:
            root: Directory containing the project directory (default: current directory)

        Returns:
            Path of the written file

        Raises:
            ConfigFileError: The project directory is missing or not writable
        """
        path = self.config_path(root)
        try:
            path.write_text(self.serialize(), encoding="utf-8")
        except OSError as e:
            _log_error(f"Could not write configuration: {path}")
            raise ConfigFileError("Could not write compiler configuration", path, e) from e

        _log_debug(f"Wrote configuration to {path}")
        return path

    # Compilation

    def build_command(self) -> List[str]:
        """
        Full compiler command line.

        The output-directory flag always comes first, then user flags in
        order, then the project name, which the compiler resolves to
        <project_name>.tex.
        """
        return [self.compiler, f"-output-directory={OUTPUT_DIR}", *self.flags, self.project_name]

    def artifact_paths(self, project_dir: PathLike = ".") -> Tuple[Path, ...]:
        """Intermediate files removed after compiling when clean is enabled."""
        out_dir = Path(project_dir) / OUTPUT_DIR
        return tuple(out_dir / f"{self.project_name}{ext}" for ext in CLEANED_ARTIFACTS)

    def compile(
        self,
        project_dir: PathLike = ".",
        reporter: Optional[Reporter] = None,
        timeout: Optional[float] = None,
        missing_artifacts_ok: bool = False,
    ) -> None:
        """
        Compile the project.

        Runs the equivalent of:
            $ pdflatex -output-directory=out <flags> <project_name>

        Then, when clean is enabled, removes out/<project_name>.aux and
        out/<project_name>.log. The success notification is only sent once
        every step has succeeded.

        Args:
            project_dir: Directory the compiler runs in; out/ must exist inside it
            reporter: Receives the success notification (default: ConsoleReporter)
            timeout: Seconds to wait for the compiler before killing it (default: no limit)
            missing_artifacts_ok: Skip missing .aux/.log files instead of failing

        Raises:
            CompilerStartError: The compiler could not be started
            CompilerExecutionError: The compiler exited with a non-zero status
            CompilerTimeoutError: The compiler exceeded timeout
            CleanupError: An artifact was missing or could not be removed
        """
        project_dir = Path(project_dir)
        command = self.build_command()
        log_compilation_start(self.project_name, command, project_dir)

        if self.mode is CompilerMode.SPAWN:
            self._run_spawned(command, project_dir, timeout)
        else:
            self._run_captured(command, project_dir, timeout)

        if self.clean:
            self._remove_artifacts(project_dir, missing_artifacts_ok)
        else:
            _log_debug("Keeping compiler artifacts (clean disabled).")

        message = f"The project `{self.project_name}` successfully compiled!"
        _log_success(message)
        (reporter or ConsoleReporter()).success(message)

    def _run_captured(self, command: List[str], cwd: Path, timeout: Optional[float]) -> None:
        start_time = time.time()
        try:
            result = subprocess.run(
                command,
                cwd=cwd,
                stdin=subprocess.DEVNULL,  # an interactive error prompt must not read the terminal
                capture_output=True,
                text=True,
                encoding="utf-8",
                errors="replace",  # compiler output is not guaranteed to be UTF-8
                timeout=timeout,
            )
        except subprocess.TimeoutExpired as e:
            _log_error(f"Compiler timed out after {timeout}s")
            raise CompilerTimeoutError(
                command, timeout, stdout=_as_text(e.stdout), stderr=_as_text(e.stderr)
            ) from e
        except OSError as e:
            _log_error(f"Compiler failed to start: {e}")
            raise CompilerStartError(command, e) from e

        log_compilation_result(
            self.project_name,
            result.returncode,
            time.time() - start_time,
            stdout=result.stdout,
            stderr=result.stderr,
        )
        if result.returncode != 0:
            raise CompilerExecutionError(
                command, result.returncode, stdout=result.stdout, stderr=result.stderr
            )

    def _run_spawned(self, command: List[str], cwd: Path, timeout: Optional[float]) -> None:
        start_time = time.time()
        try:
            process = subprocess.Popen(command, cwd=cwd)
        except OSError as e:
            _log_error(f"Compiler failed to start: {e}")
            raise CompilerStartError(command, e) from e

        try:
            returncode = process.wait(timeout=timeout)
        except subprocess.TimeoutExpired as e:
            process.kill()
            process.wait()
            _log_error(f"Compiler timed out after {timeout}s")
            raise CompilerTimeoutError(command, timeout) from e

        log_compilation_result(self.project_name, returncode, time.time() - start_time)
        if returncode != 0:
            raise CompilerExecutionError(command, returncode)

    def _remove_artifacts(self, project_dir: Path, missing_ok: bool) -> None:
        artifacts = self.artifact_paths(project_dir)
        missing = [path for path in artifacts if not path.exists()]

        # Checked up front so a strict failure leaves out/ untouched
        if missing and not missing_ok:
            _log_error(f"Missing compiler artifacts: {', '.join(str(p) for p in missing)}")
            raise CleanupError("Expected compiler artifacts not found; nothing was removed", missing)

        for path in artifacts:
            if path in missing:
                _log_warning(f"Skipping missing artifact: {path}")
                continue
            try:
                path.unlink()
            except OSError as e:
                _log_error(f"Could not remove {path}: {e}")
                raise CleanupError("Could not remove compiler artifact", [path], e) from e
            _log_debug(f"Removed {path}")


def _as_text(value: Union[str, bytes, None]) -> Optional[str]:
    if isinstance(value, bytes):
        return value.decode("utf-8", errors="replace")
    return value
