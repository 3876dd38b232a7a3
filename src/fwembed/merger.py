"""Relocatable merge of compiled object files into an existing bundle binary.

The linker never writes to the original binary. Output always goes to a
``<binary>.merged`` sibling, which is moved into place with ``os.replace``
only after the linker exits cleanly. On any failure the sibling is removed and
the original bytes are untouched.
"""

from __future__ import annotations

import os
import shutil
import subprocess
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path

from fwembed.errors import ValidationError
from fwembed.models import Architecture, MergeConfig, MergeFailure, MergeResult, MergeSuccess
from fwembed.observability import emit
from fwembed.toolchain import DEFAULT_TOOLCHAIN, ToolchainConfig

MERGED_SUFFIX = ".merged"


def architecture_from_triple(target_triple: str) -> str:
    for arch in (Architecture.ARM64, Architecture.X86_64, Architecture.ARMV7):
        if target_triple.startswith(arch.value):
            return arch.value
    return Architecture.ARM64.value


def temp_output_for(original_binary: Path) -> Path:
    original = Path(original_binary).absolute()
    return original.with_name(original.name + MERGED_SUFFIX)


@dataclass(slots=True)
class BinaryMerger:
    toolchain: ToolchainConfig = DEFAULT_TOOLCHAIN

    def merge(self, object_files: Sequence[Path], config: MergeConfig) -> MergeResult:
        if config is None:
            raise ValidationError("MergeConfig is required.", context={"operation": "merge"})
        if not object_files:
            return MergeFailure("No object files provided")

        original = Path(config.original_binary).absolute()
        if not original.is_file():
            return MergeFailure(f"Original binary not found: {original}")

        # A dry-run compile only computes object paths, so they may not exist yet.
        missing = [path for path in object_files if not Path(path).is_file()]
        if missing and not config.dry_run:
            return MergeFailure(
                "Object files not found: " + ", ".join(Path(path).name for path in missing)
            )

        command = self.build_command(object_files, config)
        final_output = self.final_output(config)

        if config.dry_run:
            emit(config.logger, "Would run: " + " ".join(command))
            return MergeSuccess(output_binary=final_output)

        temp_output = temp_output_for(original)
        try:
            result = subprocess.run(
                command,
                cwd=str(original.parent),
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
                encoding="utf-8",
                errors="replace",
                check=False,
            )
        except OSError as exc:
            temp_output.unlink(missing_ok=True)
            return MergeFailure(f"Merge failed: {exc}")

        if result.returncode != 0 or not temp_output.is_file():
            temp_output.unlink(missing_ok=True)
            output = (result.stdout or "").rstrip() or f"linker exited with {result.returncode}"
            return MergeFailure(f"Merge failed: {output}")

        try:
            if config.output_binary is None:
                os.replace(temp_output, original)
            else:
                final_output.parent.mkdir(parents=True, exist_ok=True)
                shutil.move(str(temp_output), str(final_output))
        except OSError as exc:
            temp_output.unlink(missing_ok=True)
            return MergeFailure(f"Merge failed: could not move merged binary into place: {exc}")

        emit(config.logger, f"Merged {len(object_files)} object files into binary")
        return MergeSuccess(output_binary=final_output)

    def build_command(self, object_files: Sequence[Path], config: MergeConfig) -> list[str]:
        """Return the relocatable-link argv; pure, touches no files."""
        return [
            self.toolchain.linker,
            "-r",
            "-arch",
            architecture_from_triple(config.target_triple),
            str(Path(config.original_binary).absolute()),
            *(str(Path(path).absolute()) for path in object_files),
            "-o",
            str(temp_output_for(config.original_binary)),
        ]

    @staticmethod
    def final_output(config: MergeConfig) -> Path:
        if config.output_binary is not None:
            return Path(config.output_binary).absolute()
        return Path(config.original_binary).absolute()
