"""Core typed dataclasses for bundle metadata, stage configs and stage results."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from enum import StrEnum
from pathlib import Path
from typing import ClassVar

from fwembed.errors import CompileError, EmbedError, ErrorCode, InstallError, MergeError

Logger = Callable[[str], None]

BUNDLE_EXTENSION = ".framework"


class Platform(StrEnum):
    """Apple platform families a bundle can target."""

    IOS = "ios"
    WATCHOS = "watchos"
    TVOS = "tvos"
    MACOS = "macos"


class Architecture(StrEnum):
    ARM64 = "arm64"
    X86_64 = "x86_64"
    ARMV7 = "armv7"


class EmbedStage(StrEnum):
    """Pipeline states, in execution order."""

    ANALYZING = "analyzing"
    COMPILING = "compiling"
    MERGING = "merging"
    INSTALLING = "installing"


def build_target_triple(platform: Platform, architecture: Architecture, version: str) -> str:
    """Return the compiler target triple, e.g. ``arm64-apple-ios13.0``."""
    return f"{architecture.value}-apple-{platform.value}{version}"


@dataclass(frozen=True, slots=True)
class BundleInfo:
    name: str
    bundle_dir: Path
    binary_path: Path
    platform: Platform
    architecture: Architecture
    deployment_version: str

    @property
    def target_triple(self) -> str:
        return build_target_triple(self.platform, self.architecture, self.deployment_version)

    def to_dict(self) -> dict[str, str]:
        return {
            "name": self.name,
            "bundle_dir": str(self.bundle_dir),
            "binary_path": str(self.binary_path),
            "platform": self.platform.value,
            "architecture": self.architecture.value,
            "deployment_version": self.deployment_version,
            "target_triple": self.target_triple,
        }


# ---------------------------------------------------------------------------
# Compilation
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class CompileConfig:
    bundle_path: Path
    target_triple: str
    sdk_path: str | None = None
    output_directory: Path | None = None
    working_directory: Path | None = None
    dry_run: bool = False
    logger: Logger | None = None


@dataclass(frozen=True, slots=True)
class CompileSuccess:
    object_files: tuple[Path, ...]
    module_dir: Path

    ok: ClassVar[bool] = True

    def raise_for_error(self) -> None:
        return None


@dataclass(frozen=True, slots=True)
class CompileFailure:
    message: str

    ok: ClassVar[bool] = False
    code: ClassVar[ErrorCode] = ErrorCode.COMPILE

    def raise_for_error(self) -> None:
        raise CompileError(self.message)


CompileResult = CompileSuccess | CompileFailure


# ---------------------------------------------------------------------------
# Merging
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class MergeConfig:
    original_binary: Path
    target_triple: str
    output_binary: Path | None = None
    dry_run: bool = False
    logger: Logger | None = None


@dataclass(frozen=True, slots=True)
class MergeSuccess:
    output_binary: Path

    ok: ClassVar[bool] = True

    def raise_for_error(self) -> None:
        return None


@dataclass(frozen=True, slots=True)
class MergeFailure:
    message: str

    ok: ClassVar[bool] = False
    code: ClassVar[ErrorCode] = ErrorCode.MERGE

    def raise_for_error(self) -> None:
        raise MergeError(self.message)


MergeResult = MergeSuccess | MergeFailure


# ---------------------------------------------------------------------------
# Installation
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class InstallConfig:
    dry_run: bool = False
    logger: Logger | None = None


@dataclass(frozen=True, slots=True)
class InstallSuccess:
    modules_dir: Path
    installed: tuple[Path, ...] = ()

    ok: ClassVar[bool] = True

    def raise_for_error(self) -> None:
        return None


@dataclass(frozen=True, slots=True)
class InstallFailure:
    message: str

    ok: ClassVar[bool] = False
    code: ClassVar[ErrorCode] = ErrorCode.INSTALL

    def raise_for_error(self) -> None:
        raise InstallError(self.message)


InstallResult = InstallSuccess | InstallFailure


# ---------------------------------------------------------------------------
# Embedding
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class EmbedConfig:
    sdk_path: str | None = None
    working_directory: Path | None = None
    dry_run: bool = False
    logger: Logger | None = None


@dataclass(frozen=True, slots=True)
class EmbedSuccess:
    bundle_name: str
    binary_path: Path
    sources_embedded: int
    modules_dir: Path | None = None

    ok: ClassVar[bool] = True

    def raise_for_error(self) -> None:
        return None


@dataclass(frozen=True, slots=True)
class EmbedFailure:
    message: str
    stage: EmbedStage | None = None

    ok: ClassVar[bool] = False
    code: ClassVar[ErrorCode] = ErrorCode.EMBED

    def raise_for_error(self) -> None:
        context = {"stage": self.stage.value} if self.stage is not None else None
        raise EmbedError(self.message, context=context)


EmbedResult = EmbedSuccess | EmbedFailure
