"""Install compiled interface packages into a bundle's ``Modules`` directory."""

from __future__ import annotations

import shutil
from dataclasses import dataclass
from pathlib import Path

from fwembed.models import InstallConfig, InstallFailure, InstallResult, InstallSuccess
from fwembed.observability import emit

MODULES_DIR = Path("Modules")
VERSIONED_MODULES_DIR = Path("Versions") / "A" / "Modules"


def resolve_modules_dir(bundle_dir: str | Path) -> Path | None:
    """Return the bundle's metadata directory, or ``None`` if it has neither layout.

    ``Modules`` (a plain directory, or the symlink into ``Versions/Current`` used
    by macOS bundles) wins over ``Versions/A/Modules``. Nothing is created.
    """
    bundle_path = Path(bundle_dir).absolute()
    for candidate in (bundle_path / MODULES_DIR, bundle_path / VERSIONED_MODULES_DIR):
        if candidate.is_dir():
            return candidate
    return None


@dataclass(slots=True)
class ArtifactInstaller:
    def install(
        self,
        module_dir: str | Path,
        bundle_dir: str | Path,
        config: InstallConfig | None = None,
    ) -> InstallResult:
        if config is None:
            config = InstallConfig()
        package_dir = Path(module_dir).absolute()

        # A dry-run compile only computes the package path, so it may not exist yet.
        if not package_dir.is_dir() and not config.dry_run:
            return InstallFailure(f"Interface package directory not found: {package_dir}")

        modules_dir = resolve_modules_dir(bundle_dir)
        if modules_dir is None:
            bundle_path = Path(bundle_dir).absolute()
            return InstallFailure(
                "Bundle Modules directory not found: "
                f"{bundle_path / MODULES_DIR} (or {bundle_path / VERSIONED_MODULES_DIR})"
            )

        entries = sorted(package_dir.iterdir()) if package_dir.is_dir() else []

        if config.dry_run:
            emit(config.logger, f"Would copy interface package from {package_dir} to {modules_dir}")
            return InstallSuccess(
                modules_dir=modules_dir,
                installed=tuple(modules_dir / entry.name for entry in entries),
            )

        if not entries:
            return InstallFailure(f"No interface package entries found to install in {package_dir}")

        installed: list[Path] = []
        try:
            for entry in entries:
                destination = modules_dir / entry.name
                if entry.is_dir():
                    if destination.exists() and not destination.is_dir():
                        destination.unlink()
                    shutil.copytree(entry, destination, dirs_exist_ok=True)
                else:
                    if destination.is_dir() and not destination.is_symlink():
                        shutil.rmtree(destination)
                    shutil.copy2(entry, destination)
                installed.append(destination)
                emit(config.logger, f"Installed: {entry.name}")
        except OSError as exc:
            return InstallFailure(f"Failed to install interface package: {exc}")

        emit(config.logger, f"Installed {len(installed)} interface package entries")
        return InstallSuccess(modules_dir=modules_dir, installed=tuple(installed))
