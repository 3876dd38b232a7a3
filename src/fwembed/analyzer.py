"""Bundle inspection: recover the parameters needed to compile against a framework.

Platform and architecture are inferred from the bundle's *path*, which follows
the output layout of the build system producing it (for example
``build/bin/iosArm64/releaseFramework/SampleKit.framework``). The header of the
binary is never read.
"""

from __future__ import annotations

import plistlib
import re
from dataclasses import dataclass
from pathlib import Path

from fwembed.errors import AnalysisError
from fwembed.models import BUNDLE_EXTENSION, Architecture, BundleInfo, Platform
from fwembed.toolchain import DEFAULT_TOOLCHAIN, ToolchainConfig

VERSIONED_DIR = Path("Versions") / "A"

# Ordered: first matching row wins.
PLATFORM_KEYWORDS: tuple[tuple[Platform, tuple[str, ...]], ...] = (
    (Platform.IOS, ("iosarm64", "iossimulator", "iosx64", "/ios")),
    (Platform.WATCHOS, ("watchosarm", "watchossimulator", "watchosx64", "/watchos")),
    (Platform.TVOS, ("tvosarm64", "tvossimulator", "tvosx64", "/tvos")),
    (Platform.MACOS, ("macosarm64", "macosx64", "/macos")),
)

ARCHITECTURE_KEYWORDS: tuple[tuple[Architecture, tuple[str, ...]], ...] = (
    (Architecture.ARM64, ("arm64",)),
    (Architecture.X86_64, ("x64", "x86_64")),
    (Architecture.ARMV7, ("arm32",)),
)

INFO_PLIST_CANDIDATES: tuple[Path, ...] = (
    Path("Info.plist"),
    Path("Resources") / "Info.plist",
    VERSIONED_DIR / "Resources" / "Info.plist",
)

_VERSION_RE = re.compile(r"^\d+(\.\d+)*$")


def detect_platform(path: str | Path) -> Platform:
    lowered = str(path).lower()
    for platform, keywords in PLATFORM_KEYWORDS:
        if any(keyword in lowered for keyword in keywords):
            return platform
    return Platform.MACOS


def detect_architecture(path: str | Path) -> Architecture:
    lowered = str(path).lower()
    for architecture, keywords in ARCHITECTURE_KEYWORDS:
        if any(keyword in lowered for keyword in keywords):
            return architecture
    return Architecture.ARM64


def version_key_for(platform: Platform) -> str:
    if platform is Platform.MACOS:
        return "LSMinimumSystemVersion"
    return "MinimumOSVersion"


@dataclass(slots=True)
class BundleAnalyzer:
    """Derives a ``BundleInfo`` from a ``<Name>.framework`` directory."""

    toolchain: ToolchainConfig = DEFAULT_TOOLCHAIN

    def analyze(self, bundle_dir: str | Path) -> BundleInfo:
        """Return bundle metadata or raise ``AnalysisError``."""
        bundle_path = Path(bundle_dir).absolute()
        if not bundle_path.is_dir():
            raise AnalysisError(
                f"Bundle directory does not exist: {bundle_path}",
                hint="Build the framework before embedding into it.",
                context={"bundle": str(bundle_path)},
            )

        name = self.bundle_name(bundle_path)
        if name is None:
            raise AnalysisError(
                f"Bundle directory must end with `{BUNDLE_EXTENSION}`: {bundle_path}",
                context={"bundle": str(bundle_path)},
            )

        binary_path = self.locate_binary(bundle_path, name)
        if binary_path is None:
            raise AnalysisError(
                f"No binary found inside bundle: {bundle_path}",
                hint=f"Expected `{name}` or `{VERSIONED_DIR / name}` inside the bundle.",
                context={"bundle": str(bundle_path), "name": name},
            )

        platform = detect_platform(bundle_path)
        return BundleInfo(
            name=name,
            bundle_dir=bundle_path,
            binary_path=binary_path,
            platform=platform,
            architecture=detect_architecture(bundle_path),
            deployment_version=self.deployment_version(bundle_path, platform),
        )

    def analyze_or_none(self, bundle_dir: str | Path) -> BundleInfo | None:
        try:
            return self.analyze(bundle_dir)
        except AnalysisError:
            return None

    @staticmethod
    def bundle_name(bundle_path: Path) -> str | None:
        if not bundle_path.name.endswith(BUNDLE_EXTENSION):
            return None
        name = bundle_path.name[: -len(BUNDLE_EXTENSION)]
        return name or None

    @staticmethod
    def locate_binary(bundle_path: Path, name: str) -> Path | None:
        for candidate in (bundle_path / name, bundle_path / VERSIONED_DIR / name):
            if candidate.is_file():
                return candidate
        return None

    def deployment_version(self, bundle_path: Path, platform: Platform) -> str:
        """Read the minimum OS version from Info.plist, falling back to a default."""
        key = version_key_for(platform)
        for relative in INFO_PLIST_CANDIDATES:
            plist_path = bundle_path / relative
            if not plist_path.is_file():
                continue
            try:
                with plist_path.open("rb") as handle:
                    payload = plistlib.load(handle)
            except Exception:  # noqa: BLE001
                continue
            if not isinstance(payload, dict):
                continue
            value = payload.get(key)
            if isinstance(value, str) and _VERSION_RE.match(value.strip()):
                return value.strip()
        return self.toolchain.default_version(platform)
