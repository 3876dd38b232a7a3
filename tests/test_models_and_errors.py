from pathlib import Path

import pytest

from fwembed.errors import (
    AnalysisError,
    CompileError,
    EmbedError,
    ErrorCode,
    InstallError,
    MergeError,
    ToolchainError,
    ValidationError,
)
from fwembed.models import (
    Architecture,
    BundleInfo,
    CompileFailure,
    CompileSuccess,
    EmbedFailure,
    EmbedStage,
    InstallFailure,
    MergeFailure,
    MergeSuccess,
    Platform,
    build_target_triple,
)


def test_error_codes_are_stable_and_machine_readable() -> None:
    errors = [
        ValidationError("bad input"),
        AnalysisError("not a bundle"),
        CompileError("swiftc failed"),
        MergeError("ld failed"),
        InstallError("no Modules"),
        EmbedError("pipeline failed"),
        ToolchainError("swiftc missing"),
    ]
    assert [error.code for error in errors] == [
        ErrorCode.VALIDATION.value,
        ErrorCode.ANALYSIS.value,
        ErrorCode.COMPILE.value,
        ErrorCode.MERGE.value,
        ErrorCode.INSTALL.value,
        ErrorCode.EMBED.value,
        ErrorCode.TOOLCHAIN.value,
    ]


def test_error_renders_hint_and_context() -> None:
    error = AnalysisError(
        "No binary found inside bundle.",
        hint="Build the framework first.",
        context={"bundle": "/b/K.framework", "name": ""},
    )

    assert str(error) == (
        "No binary found inside bundle.\nHint: Build the framework first.\n  bundle: /b/K.framework"
    )
    assert error.to_dict() == {
        "code": "E_ANALYSIS",
        "message": str(error),
        "context": {"bundle": "/b/K.framework", "name": ""},
        "hint": "Build the framework first.",
    }


def test_results_raise_matching_errors() -> None:
    CompileSuccess(object_files=(), module_dir=Path("m")).raise_for_error()
    MergeSuccess(output_binary=Path("b")).raise_for_error()

    with pytest.raises(CompileError):
        CompileFailure("Compilation failed: boom").raise_for_error()
    with pytest.raises(MergeError):
        MergeFailure("No object files provided").raise_for_error()
    with pytest.raises(InstallError):
        InstallFailure("No interface package entries found").raise_for_error()

    assert CompileFailure("x").code is ErrorCode.COMPILE
    assert not MergeFailure("x").ok
    assert MergeSuccess(output_binary=Path("b")).ok


def test_target_triple_is_derived_from_platform_arch_and_version() -> None:
    info = BundleInfo(
        name="K",
        bundle_dir=Path("/b/K.framework"),
        binary_path=Path("/b/K.framework/K"),
        platform=Platform.TVOS,
        architecture=Architecture.X86_64,
        deployment_version="13.0",
    )

    assert info.target_triple == build_target_triple(Platform.TVOS, Architecture.X86_64, "13.0")
    assert info.target_triple == "x86_64-apple-tvos13.0"
    assert info.to_dict()["target_triple"] == "x86_64-apple-tvos13.0"


def test_embed_error_exposes_failed_stage() -> None:
    with pytest.raises(EmbedError) as excinfo:
        EmbedFailure("Merge failed: ld: boom", stage=EmbedStage.MERGING).raise_for_error()

    error = excinfo.value
    assert error.stage == "merging"
    assert error.to_dict()["stage"] == "merging"
    assert "stage" not in ValidationError("bad config").to_dict()
