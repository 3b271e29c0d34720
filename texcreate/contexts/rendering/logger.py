"""
Rendering context logger.

Provides logging interface for rendering context with automatic [render] prefix.
All rendering modules should import from this module, not from utils.logger directly.
"""

from pathlib import Path
from typing import List, Optional

from loguru import logger

from texcreate.utils.logger import setup_logger as _setup_logger

CONTEXT_PREFIX = "[render]"


def setup_rendering_logger(log_dir: Path, compiler: Optional[str] = None) -> Path:
    """
    Setup logger for rendering context.

    Args:
        log_dir: Directory for this rendering session
        compiler: Compiler recorded in the provenance header

    Returns:
        Path to log file
    """
    return _setup_logger(
        context_name="render",
        log_dir=log_dir,
        extra_provenance={"LaTeX compiler": compiler} if compiler else None,
    )


# Wrapper functions with automatic [render] prefix


def _log_info(message: str) -> None:
    """Log info message with [render] prefix."""
    logger.info(f"{CONTEXT_PREFIX} {message}")


def _log_success(message: str) -> None:
    """Log success message with [render] prefix."""
    logger.success(f"{CONTEXT_PREFIX} {message}")


def _log_error(message: str) -> None:
    """Log error message with [render] prefix."""
    logger.error(f"{CONTEXT_PREFIX} {message}")


def _log_warning(message: str) -> None:
    """Log warning message with [render] prefix."""
    logger.warning(f"{CONTEXT_PREFIX} {message}")


def _log_debug(message: str) -> None:
    """Log debug message with [render] prefix."""
    logger.debug(f"{CONTEXT_PREFIX} {message}")


# High-level rendering-specific logging helpers


def log_compilation_start(project_name: str, command: List[str], working_dir: Path) -> None:
    """Log start of compilation with context."""
    _log_info(f"Starting compilation: {project_name}")
    _log_debug(f"  Working directory: {working_dir}")
    _log_debug(f"  Command: {' '.join(command)}")


def log_compilation_result(
    project_name: str,
    returncode: int,
    elapsed_time: float,
    stdout: Optional[str] = None,
    stderr: Optional[str] = None,
) -> None:
    """
    Log compiler exit status and, when captured, its raw output.

    Args:
        project_name: Project identifier
        returncode: Compiler exit status
        elapsed_time: Time taken to compile
        stdout: Captured standard output (Output mode only)
        stderr: Captured standard error (Output mode only)
    """
    if returncode == 0:
        _log_info(f"{project_name}: compiler exited cleanly ({elapsed_time:.2f}s)")
    else:
        _log_error(f"{project_name}: compiler exited with status {returncode} ({elapsed_time:.2f}s)")

    # raw=True keeps loguru from prefixing every line of multi-line output
    if stdout:
        logger.opt(raw=True).debug(f"\n{'=' * 80}\nCOMPILER STDOUT:\n{'=' * 80}\n{stdout}\n")
    if stderr:
        logger.opt(raw=True).debug(f"\n{'=' * 80}\nCOMPILER STDERR:\n{'=' * 80}\n{stderr}\n")
