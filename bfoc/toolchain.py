from __future__ import annotations

import logging
import os
import shlex
import shutil
import subprocess
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import List, Mapping, Optional, Tuple, Union

logger = logging.getLogger(__name__)

DEFAULT_COMPILER = "gcc"


class ToolchainError(Exception):
    """Raised when the native compiler is missing or reports a failure."""

    def __init__(self, message: str, returncode: Optional[int] = None, stderr: str = "") -> None:
        super().__init__(message)
        self.returncode = returncode
        self.stderr = stderr


@dataclass
class Toolchain:
    """Hands generated C source to an external compiler."""

    compiler: str = DEFAULT_COMPILER
    flags: Tuple[str, ...] = ("-O3",)
    keep_source: bool = False

    @classmethod
    def from_environment(
        cls,
        environ: Optional[Mapping[str, str]] = None,
        **overrides,
    ) -> "Toolchain":
        env = os.environ if environ is None else environ
        compiler = env.get("CC", "").strip() or DEFAULT_COMPILER
        return cls(compiler=compiler, **overrides)

    def resolve(self) -> str:
        words = shlex.split(self.compiler)
        if not words:
            raise ToolchainError("No C compiler configured")
        found = shutil.which(words[0])
        if found is None:
            raise ToolchainError(f"C compiler not found: {words[0]}")
        return found

    def command(self, source: Union[str, Path], output: Union[str, Path]) -> List[str]:
        return [*shlex.split(self.compiler), *self.flags, str(source), "-o", str(output)]

    def compile_source(self, c_source: str, output_path: Union[str, Path]) -> Path:
        self.resolve()
        output = Path(output_path)
        try:
            handle = tempfile.NamedTemporaryFile(
                "w",
                prefix="bfoc.",
                suffix=".c",
                delete=False,
                encoding="utf-8",
            )
        except OSError as exc:
            raise ToolchainError(f"couldn't create temporary source file: {exc}") from exc
        source_path = Path(handle.name)
        try:
            try:
                with handle:
                    handle.write(c_source)
            except OSError as exc:
                raise ToolchainError(f"couldn't write temporary source file {source_path}: {exc}") from exc
            logger.info("wrote intermediate C source to %s", source_path)

            command = self.command(source_path, output)
            logger.debug("running %s", shlex.join(command))
            try:
                result = subprocess.run(command, capture_output=True, text=True, check=False)
            except OSError as exc:
                raise ToolchainError(f"couldn't execute compiler: {exc}") from exc
            if result.returncode != 0:
                stderr = result.stderr.strip()
                message = f"compiler reported failure (code {result.returncode})"
                if stderr:
                    message = f"{message}: {stderr}"
                raise ToolchainError(message, returncode=result.returncode, stderr=stderr)
        finally:
            if not self.keep_source:
                source_path.unlink(missing_ok=True)

        logger.info("successfully compiled output %s", output)
        return output


__all__ = [
    "DEFAULT_COMPILER",
    "Toolchain",
    "ToolchainError",
]
