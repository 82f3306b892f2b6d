"""
External Toolchain Driver
=========================

Assembles, links and runs the programs exprcc generates. This is the
"cc -o tmp tmp.s && ./tmp; echo $?" step of the verification harness,
kept out of the compiler core: nothing in the lex/parse/generate
pipeline imports this module.

Configuration can come from:
- Default values (defined here)
- Environment variables (ToolchainConfig.from_env)

Environment Variables
---------------------
EXPRCC_CC        C compiler driver used to assemble and link (default: cc)
EXPRCC_CFLAGS    Extra flags, whitespace separated
EXPRCC_WORK_DIR  Keep build products here instead of a temporary directory
EXPRCC_TIMEOUT   Seconds allowed for each external command (default: 10)

Usage
-----
>>> from exprcc import compile_expression
>>> from exprcc.toolchain import build_and_run
>>> build_and_run(compile_expression("5+6*7"))
47
"""

import logging
import os
import platform
import shlex
import shutil
import subprocess
import tempfile
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from exprcc.errors import ToolchainError

logger = logging.getLogger(__name__)


# Host architectures that can run the generated x86-64 code natively
X86_64_MACHINES = ("x86_64", "amd64")


@dataclass
class ToolchainConfig:
    """
    Configuration for the external assembler/linker and executor.

    Attributes:
        cc: C compiler driver (assembles .s and links against the C runtime)
        cflags: Extra arguments passed to cc before the input file
        work_dir: Directory for build products; None means a temporary
                  directory removed after each build_and_run()
        timeout: Seconds allowed for each external command
    """
    cc: str = "cc"
    cflags: list[str] = field(default_factory=list)
    work_dir: Optional[Path] = None
    timeout: float = 10.0

    @classmethod
    def from_env(cls) -> "ToolchainConfig":
        """
        Create a ToolchainConfig from environment variables.

        Unset variables keep their defaults. An unparsable EXPRCC_TIMEOUT
        is ignored with a warning.
        """
        config = cls()

        if cc := os.environ.get("EXPRCC_CC"):
            config.cc = cc

        if cflags := os.environ.get("EXPRCC_CFLAGS"):
            config.cflags = shlex.split(cflags)

        if work_dir := os.environ.get("EXPRCC_WORK_DIR"):
            config.work_dir = Path(work_dir)

        if timeout := os.environ.get("EXPRCC_TIMEOUT"):
            try:
                config.timeout = float(timeout)
            except ValueError:
                logger.warning(f"Ignoring invalid EXPRCC_TIMEOUT={timeout!r}")

        return config


def toolchain_available(config: Optional[ToolchainConfig] = None) -> bool:
    """
    Return True if generated programs can be built and run on this host.

    Needs the configured compiler on PATH and an x86-64 machine.
    """
    config = config or ToolchainConfig.from_env()
    if platform.machine().lower() not in X86_64_MACHINES:
        return False
    return shutil.which(config.cc) is not None


def assemble_and_link(
    assembly: str,
    output_path: Path,
    config: Optional[ToolchainConfig] = None,
) -> Path:
    """
    Assemble and link assembly text into an executable.

    The text is written next to the executable as <name>.s.

    Args:
        assembly: Complete assembly program from the code generator
        output_path: Path of the executable to create
        config: Toolchain settings (environment defaults if None)

    Returns:
        Path to the executable

    Raises:
        ToolchainError: If the compiler is missing or rejects the input
    """
    config = config or ToolchainConfig.from_env()
    output_path = Path(output_path)
    asm_path = output_path.with_suffix(".s")
    asm_path.write_text(assembly, encoding="utf-8")

    command = [config.cc, *config.cflags, "-o", str(output_path), str(asm_path)]
    logger.debug(f"Running: {shlex.join(command)}")

    try:
        completed = subprocess.run(
            command,
            capture_output=True,
            text=True,
            timeout=config.timeout,
        )
    except FileNotFoundError as e:
        raise ToolchainError(f"compiler '{config.cc}' not found", command) from e
    except subprocess.TimeoutExpired as e:
        raise ToolchainError(f"'{config.cc}' timed out after {config.timeout}s", command) from e

    if completed.returncode != 0:
        raise ToolchainError(
            f"'{config.cc}' failed with exit status {completed.returncode}",
            command,
            completed.stderr,
        )

    return output_path


def run_executable(path: Path, config: Optional[ToolchainConfig] = None) -> int:
    """
    Run an executable and return its exit status.

    Returns:
        Exit status 0-255, or the negative signal number if the program
        was killed by a signal (SIGFPE on division by zero)

    Raises:
        ToolchainError: If the program cannot be started or times out
    """
    config = config or ToolchainConfig.from_env()
    command = [str(Path(path).resolve())]

    try:
        completed = subprocess.run(command, capture_output=True, timeout=config.timeout)
    except OSError as e:
        raise ToolchainError(f"cannot execute {path}: {e}", command) from e
    except subprocess.TimeoutExpired as e:
        raise ToolchainError(f"{path} timed out after {config.timeout}s", command) from e

    logger.debug(f"{path} exited with status {completed.returncode}")
    return completed.returncode


def build_and_run(assembly: str, config: Optional[ToolchainConfig] = None) -> int:
    """
    Assemble, link and run a generated program.

    Returns:
        The program's exit status (see run_executable)

    Raises:
        ToolchainError: If any external step fails
    """
    config = config or ToolchainConfig.from_env()

    if config.work_dir is not None:
        config.work_dir.mkdir(parents=True, exist_ok=True)
        executable = assemble_and_link(assembly, config.work_dir / "tmp", config)
        return run_executable(executable, config)

    with tempfile.TemporaryDirectory(prefix="exprcc-") as tmp:
        executable = assemble_and_link(assembly, Path(tmp) / "tmp", config)
        return run_executable(executable, config)
