"""
Native build glue for emitted C programs.

Writes the generated C source, compiles it with an external C compiler and
optionally runs the executable. Compiler selection: explicit argument, then
the ``CC`` environment variable, then ``cc``.
"""

from __future__ import annotations

import logging
import os
import shutil
import subprocess
import sys
from pathlib import Path
from typing import List, Mapping, Optional

from .errors import BuildError

LOGGER = logging.getLogger("stabel.build")

DEFAULT_CFLAGS = ["-std=c99", "-O1"]


def default_executable_path(c_path: Path) -> Path:
    suffix = ".exe" if sys.platform.startswith("win") else ""
    return Path(c_path).with_suffix(suffix)


def write_source(path: Path, code: str) -> Path:
    path = Path(path)
    if path.parent and not path.parent.exists():
        path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(code, encoding="utf-8")
    LOGGER.info("wrote %s (%d bytes)", path, len(code.encode("utf-8")))
    return path


class NativeBuilder:
    """Compile and run generated C with an external toolchain."""

    def __init__(
        self,
        compiler: Optional[str] = None,
        *,
        cflags: Optional[List[str]] = None,
        environ: Optional[Mapping[str, str]] = None,
    ) -> None:
        env = os.environ if environ is None else environ
        self.compiler = compiler or env.get("CC") or "cc"
        self.cflags = list(DEFAULT_CFLAGS if cflags is None else cflags)

    def find_tool(self) -> Path:
        """Locate the compiler on PATH (or accept an explicit existing path)."""
        candidate = Path(self.compiler)
        if candidate.is_file():
            return candidate
        which_result = shutil.which(self.compiler)
        if which_result:
            return Path(which_result)
        raise BuildError(f"C compiler not found: {self.compiler}")

    def run_command(self, cmd: List[str], cwd: Optional[Path] = None) -> subprocess.CompletedProcess:
        """Run a build command and raise BuildError when it fails."""
        cmd_str = " ".join(str(c) for c in cmd)
        LOGGER.debug("running: %s", cmd_str)
        try:
            return subprocess.run(
                [str(c) for c in cmd],
                cwd=cwd,
                check=True,
                capture_output=True,
                text=True,
            )
        except subprocess.CalledProcessError as exc:
            details = (exc.stderr or exc.stdout or "").strip()
            message = f"Command failed: {cmd_str}"
            if details:
                message += f"\n{details}"
            raise BuildError(message) from exc

    def compile(self, c_path: Path, exe_path: Optional[Path] = None) -> Path:
        c_path = Path(c_path)
        if not c_path.exists():
            raise BuildError(f"C source not found: {c_path}")
        exe_path = Path(exe_path) if exe_path else default_executable_path(c_path)
        tool = self.find_tool()
        self.run_command([tool, *self.cflags, "-o", exe_path, c_path])
        LOGGER.info("built %s", exe_path)
        return exe_path

    def run(self, exe_path: Path, *, timeout: Optional[float] = None) -> subprocess.CompletedProcess:
        """Run a built program; a non-zero exit is returned, not raised."""
        exe_path = Path(exe_path)
        if not exe_path.exists():
            raise BuildError(f"Executable not found: {exe_path}")
        return subprocess.run(
            [str(exe_path.resolve())],
            capture_output=True,
            text=True,
            timeout=timeout,
        )


__all__ = ["NativeBuilder", "write_source", "default_executable_path", "DEFAULT_CFLAGS"]
