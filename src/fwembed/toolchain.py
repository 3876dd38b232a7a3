"""Toolchain configuration and SDK discovery.

``ToolchainConfig`` is the single configuration object handed to the
embedding pipeline. ``DEFAULT_TOOLCHAIN`` is the instance used when callers
do not pass one: ``swiftc`` for compilation, ``ld`` for relocatable merges and
``xcrun`` for SDK lookup, all resolved through ``PATH``.
"""

from __future__ import annotations

import os
import shutil
import subprocess
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path

from fwembed.errors import ToolchainError
from fwembed.models import Platform

DEFAULT_DEPLOYMENT_VERSIONS: Mapping[Platform, str] = {
    Platform.IOS: "13.0",
    Platform.WATCHOS: "6.0",
    Platform.TVOS: "13.0",
    Platform.MACOS: "10.15",
}

ENV_COMPILER = "FWEMBED_SWIFTC"
ENV_LINKER = "FWEMBED_LD"
ENV_XCRUN = "FWEMBED_XCRUN"


@dataclass(frozen=True, slots=True)
class ToolchainConfig:
    compiler: str = "swiftc"
    linker: str = "ld"
    xcrun: str = "xcrun"
    module_suffix: str = "Overlay"
    default_versions: Mapping[Platform, str] = field(
        default_factory=lambda: dict(DEFAULT_DEPLOYMENT_VERSIONS)
    )

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> ToolchainConfig:
        """Build a config honouring ``FWEMBED_SWIFTC``/``FWEMBED_LD``/``FWEMBED_XCRUN``."""
        env = os.environ if environ is None else environ
        return cls(
            compiler=env.get(ENV_COMPILER) or "swiftc",
            linker=env.get(ENV_LINKER) or "ld",
            xcrun=env.get(ENV_XCRUN) or "xcrun",
        )

    def default_version(self, platform: Platform) -> str:
        return self.default_versions.get(platform, DEFAULT_DEPLOYMENT_VERSIONS[platform])

    def overlay_module_name(self, bundle_name: str) -> str:
        return f"{bundle_name}{self.module_suffix}"


DEFAULT_TOOLCHAIN = ToolchainConfig()


def ensure_tool(tool: str, *, operation: str) -> str:
    """Return the absolute path of *tool* or raise ``ToolchainError``."""
    resolved = shutil.which(tool)
    if resolved is None:
        raise ToolchainError(
            f"Required tool `{tool}` is not in PATH.",
            hint="Install the Xcode command line tools or point FWEMBED_* at the binary.",
            context={"tool": tool, "operation": operation},
        )
    return resolved


# Checked in order; simulator keywords must win over device keywords.
_SDK_TABLE: tuple[tuple[str, str | None, str], ...] = (
    ("ios", "simulator", "iphonesimulator"),
    ("ios", None, "iphoneos"),
    ("watchos", "simulator", "watchsimulator"),
    ("watchos", None, "watchos"),
    ("tvos", "simulator", "appletvsimulator"),
    ("tvos", None, "appletvos"),
)


def sdk_name_for(bundle_dir: str | Path) -> str:
    """Pick the ``xcrun --sdk`` name from the bundle's path."""
    path = str(Path(bundle_dir).absolute()).lower()
    for platform_key, variant_key, sdk in _SDK_TABLE:
        if platform_key in path and (variant_key is None or variant_key in path):
            return sdk
    return "macosx"


def detect_sdk_path(
    bundle_dir: str | Path,
    toolchain: ToolchainConfig = DEFAULT_TOOLCHAIN,
) -> str | None:
    """Ask ``xcrun`` for the SDK matching *bundle_dir*; ``None`` if unavailable."""
    command = [toolchain.xcrun, "--sdk", sdk_name_for(bundle_dir), "--show-sdk-path"]
    try:
        result = subprocess.run(
            command,
            stdout=subprocess.PIPE,
            stderr=subprocess.STDOUT,
            encoding="utf-8",
            errors="replace",
            check=False,
        )
    except OSError:
        return None
    sdk_path = (result.stdout or "").strip()
    if result.returncode != 0 or not sdk_path:
        return None
    return sdk_path
