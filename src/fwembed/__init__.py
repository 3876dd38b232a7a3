"""Public package entrypoint for the framework embedding pipeline."""

from .analyzer import BundleAnalyzer
from .compiler import SourceCompiler
from .embedder import EmbeddingOrchestrator, collect_sources
from .errors import (
    AnalysisError,
    CompileError,
    EmbedError,
    ErrorCode,
    FwEmbedError,
    InstallError,
    MergeError,
    ToolchainError,
    ValidationError,
)
from .installer import ArtifactInstaller
from .merger import BinaryMerger
from .models import (
    Architecture,
    BundleInfo,
    CompileConfig,
    CompileFailure,
    CompileResult,
    CompileSuccess,
    EmbedConfig,
    EmbedFailure,
    EmbedResult,
    EmbedStage,
    EmbedSuccess,
    InstallConfig,
    InstallFailure,
    InstallResult,
    InstallSuccess,
    MergeConfig,
    MergeFailure,
    MergeResult,
    MergeSuccess,
    Platform,
)
from .observability import EmbedReport, StructuredLogger
from .toolchain import DEFAULT_TOOLCHAIN, ToolchainConfig

__all__ = [
    "DEFAULT_TOOLCHAIN",
    "AnalysisError",
    "Architecture",
    "ArtifactInstaller",
    "BinaryMerger",
    "BundleAnalyzer",
    "BundleInfo",
    "CompileConfig",
    "CompileError",
    "CompileFailure",
    "CompileResult",
    "CompileSuccess",
    "EmbedConfig",
    "EmbedError",
    "EmbedFailure",
    "EmbedReport",
    "EmbedResult",
    "EmbedStage",
    "EmbedSuccess",
    "EmbeddingOrchestrator",
    "ErrorCode",
    "FwEmbedError",
    "InstallConfig",
    "InstallError",
    "InstallFailure",
    "InstallResult",
    "InstallSuccess",
    "MergeConfig",
    "MergeError",
    "MergeFailure",
    "MergeResult",
    "MergeSuccess",
    "Platform",
    "SourceCompiler",
    "StructuredLogger",
    "ToolchainConfig",
    "ToolchainError",
    "ValidationError",
    "collect_sources",
]
