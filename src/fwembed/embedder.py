"""Embedding orchestration: analyze, compile, merge, install.

Each stage runs only after the previous one succeeded; the first failure ends
the run. No stage is retried and nothing is rolled back beyond what
``BinaryMerger`` guarantees for the binary itself.
"""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path

from fwembed.analyzer import BundleAnalyzer
from fwembed.compiler import SourceCompiler
from fwembed.errors import AnalysisError, ValidationError
from fwembed.installer import ArtifactInstaller
from fwembed.merger import BinaryMerger
from fwembed.models import (
    CompileConfig,
    CompileFailure,
    EmbedConfig,
    EmbedFailure,
    EmbedResult,
    EmbedStage,
    EmbedSuccess,
    InstallConfig,
    InstallFailure,
    MergeConfig,
    MergeFailure,
)
from fwembed.observability import emit
from fwembed.toolchain import DEFAULT_TOOLCHAIN, ToolchainConfig

DEFAULT_SOURCE_SUFFIX = ".swift"


def collect_sources(directory: str | Path, suffix: str = DEFAULT_SOURCE_SUFFIX) -> list[Path]:
    """Return the interface-source files directly inside *directory*, sorted."""
    source_dir = Path(directory)
    if not source_dir.is_dir():
        return []
    return sorted(
        path.absolute() for path in source_dir.iterdir() if path.is_file() and path.suffix == suffix
    )


class EmbeddingOrchestrator:
    """Runs the four embedding stages against one bundle.

    Stages default to instances built from *toolchain*; tests and callers may
    inject their own.
    """

    def __init__(
        self,
        toolchain: ToolchainConfig = DEFAULT_TOOLCHAIN,
        *,
        analyzer: BundleAnalyzer | None = None,
        compiler: SourceCompiler | None = None,
        merger: BinaryMerger | None = None,
        installer: ArtifactInstaller | None = None,
    ) -> None:
        self.toolchain = toolchain
        self.analyzer = analyzer or BundleAnalyzer(toolchain=toolchain)
        self.compiler = compiler or SourceCompiler(toolchain=toolchain)
        self.merger = merger or BinaryMerger(toolchain=toolchain)
        self.installer = installer or ArtifactInstaller()

    def embed(
        self,
        bundle_dir: str | Path,
        source_files: Sequence[Path],
        config: EmbedConfig | None = None,
    ) -> EmbedResult:
        if config is None:
            config = EmbedConfig()
        if not isinstance(config, EmbedConfig):
            raise ValidationError(
                "embed() expects an EmbedConfig.",
                context={"operation": "embed", "type": type(config).__name__},
            )
        if not source_files:
            return EmbedFailure("No source files provided")

        sources = [Path(path) for path in source_files]
        bundle_path = Path(bundle_dir).absolute()

        try:
            info = self.analyzer.analyze(bundle_path)
        except AnalysisError as exc:
            return EmbedFailure(f"Bundle analysis failed: {exc.args[0]}", EmbedStage.ANALYZING)
        emit(
            config.logger,
            f"Analyzed bundle: {info.name} ({info.platform.value}, {info.target_triple})",
        )

        compile_result = self.compiler.compile(
            sources,
            CompileConfig(
                bundle_path=info.bundle_dir,
                target_triple=info.target_triple,
                sdk_path=config.sdk_path,
                output_directory=config.working_directory,
                dry_run=config.dry_run,
                logger=config.logger,
            ),
        )
        if isinstance(compile_result, CompileFailure):
            return EmbedFailure(
                f"Compilation failed: {_strip_prefix(compile_result.message, 'Compilation failed: ')}",
                EmbedStage.COMPILING,
            )
        emit(config.logger, f"Compiled {len(compile_result.object_files)} object files")

        merge_result = self.merger.merge(
            compile_result.object_files,
            MergeConfig(
                original_binary=info.binary_path,
                target_triple=info.target_triple,
                dry_run=config.dry_run,
                logger=config.logger,
            ),
        )
        if isinstance(merge_result, MergeFailure):
            return EmbedFailure(
                f"Merge failed: {_strip_prefix(merge_result.message, 'Merge failed: ')}",
                EmbedStage.MERGING,
            )

        install_result = self.installer.install(
            compile_result.module_dir,
            info.bundle_dir,
            InstallConfig(dry_run=config.dry_run, logger=config.logger),
        )
        if isinstance(install_result, InstallFailure):
            return EmbedFailure(
                f"Installation failed: {install_result.message}",
                EmbedStage.INSTALLING,
            )

        emit(config.logger, f"Embedded overlay into {merge_result.output_binary}")
        return EmbedSuccess(
            bundle_name=info.name,
            binary_path=merge_result.output_binary,
            sources_embedded=len(sources),
            modules_dir=install_result.modules_dir,
        )


def _strip_prefix(message: str, prefix: str) -> str:
    # Stage messages may already carry the stage prefix; avoid doubling it.
    return message[len(prefix) :] if message.startswith(prefix) else message
