"""Overlay compilation of interface sources into one object file plus module."""

from __future__ import annotations

import subprocess
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path

from fwembed.errors import ValidationError
from fwembed.models import (
    BUNDLE_EXTENSION,
    CompileConfig,
    CompileFailure,
    CompileResult,
    CompileSuccess,
)
from fwembed.observability import emit
from fwembed.toolchain import DEFAULT_TOOLCHAIN, ToolchainConfig

MODULE_DIR_NAME = "module"
MODULE_FILE_SUFFIX = ".swiftmodule"


@dataclass(slots=True)
class SourceCompiler:
    toolchain: ToolchainConfig = DEFAULT_TOOLCHAIN

    def compile(self, source_files: Sequence[Path], config: CompileConfig) -> CompileResult:
        if config is None:
            raise ValidationError("CompileConfig is required.", context={"operation": "compile"})
        if not source_files:
            return CompileFailure("No source files provided")

        missing = [path for path in source_files if not Path(path).is_file()]
        if missing:
            return CompileFailure(
                "Source files not found: " + ", ".join(Path(path).name for path in missing)
            )

        command = self.build_command(source_files, config)
        object_file = self.object_file(source_files, config)
        module_dir = self.module_dir(source_files, config)

        if config.dry_run:
            emit(config.logger, "Would run: " + " ".join(command))
            return CompileSuccess(object_files=(object_file,), module_dir=module_dir)

        cwd = config.working_directory or Path(source_files[0]).absolute().parent
        try:
            object_file.parent.mkdir(parents=True, exist_ok=True)
            module_dir.mkdir(parents=True, exist_ok=True)
            result = subprocess.run(
                command,
                cwd=str(cwd),
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
                encoding="utf-8",
                errors="replace",
                check=False,
            )
        except OSError as exc:
            return CompileFailure(f"Compilation failed: {exc}")

        if result.returncode != 0:
            return CompileFailure(f"Compilation failed: {result.stdout or ''}".rstrip())

        emit(config.logger, f"Compiled {len(source_files)} source files with module interface")
        return CompileSuccess(object_files=(object_file,), module_dir=module_dir)

    def build_command(self, source_files: Sequence[Path], config: CompileConfig) -> list[str]:
        """Return the compiler argv; pure, touches no files."""
        bundle_name = bundle_name_of(config.bundle_path)
        module_name = self.toolchain.overlay_module_name(bundle_name)
        module_dir = self.module_dir(source_files, config)

        cmd = [
            self.toolchain.compiler,
            "-module-name",
            module_name,
            # One object file plus a resilient module interface.
            "-emit-object",
            "-emit-module",
            "-emit-module-interface",
            "-enable-library-evolution",
            "-whole-module-optimization",
            "-emit-module-path",
            str(module_dir / f"{module_name}{MODULE_FILE_SUFFIX}"),
            "-target",
            config.target_triple,
        ]
        if config.sdk_path:
            cmd.extend(["-sdk", config.sdk_path])
        cmd.extend(
            [
                "-F",
                str(Path(config.bundle_path).absolute().parent),
                "-framework",
                bundle_name,
                "-o",
                str(self.object_file(source_files, config)),
            ]
        )
        cmd.extend(str(Path(path).absolute()) for path in source_files)
        return cmd

    @staticmethod
    def output_dir(source_files: Sequence[Path], config: CompileConfig) -> Path:
        if config.output_directory is not None:
            return Path(config.output_directory).absolute()
        return Path(source_files[0]).absolute().parent

    def object_file(self, source_files: Sequence[Path], config: CompileConfig) -> Path:
        return self.output_dir(source_files, config) / f"{Path(source_files[0]).stem}.o"

    def module_dir(self, source_files: Sequence[Path], config: CompileConfig) -> Path:
        return self.output_dir(source_files, config) / MODULE_DIR_NAME


def bundle_name_of(bundle_path: str | Path) -> str:
    name = Path(bundle_path).name
    if name.endswith(BUNDLE_EXTENSION):
        return name[: -len(BUNDLE_EXTENSION)]
    return Path(bundle_path).stem
