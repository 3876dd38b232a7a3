"""Typed pipeline error model with stable, machine-readable error codes."""

from __future__ import annotations

from collections.abc import Mapping
from enum import StrEnum


class ErrorCode(StrEnum):
    """Stable error identifiers used across pipeline stages."""

    VALIDATION = "E_VALIDATION"
    ANALYSIS = "E_ANALYSIS"
    COMPILE = "E_COMPILE"
    MERGE = "E_MERGE"
    INSTALL = "E_INSTALL"
    EMBED = "E_EMBED"
    TOOLCHAIN = "E_TOOLCHAIN"


class FwEmbedError(Exception):
    """Base pipeline error; carries a code, an optional hint and context.

    A ``stage`` entry in *context* names the pipeline stage that failed and is
    surfaced as its own key by :meth:`to_dict`.
    """

    code: str
    hint: str | None
    context: Mapping[str, str]

    def __init__(
        self,
        message: str,
        *,
        code: ErrorCode,
        hint: str | None = None,
        context: Mapping[str, str] | None = None,
    ) -> None:
        super().__init__(message)
        self.code = code.value
        self.hint = hint
        self.context = dict(context or {})

    @property
    def stage(self) -> str | None:
        return self.context.get("stage") or None

    def __str__(self) -> str:
        parts = [super().__str__()]
        if self.hint:
            parts.append(f"Hint: {self.hint}")
        if self.context:
            for key, value in self.context.items():
                if value:
                    parts.append(f"  {key}: {value}")
        return "\n".join(parts)

    def to_dict(self) -> dict[str, object]:
        payload: dict[str, object] = {
            "code": self.code,
            "message": str(self),
            "context": dict(self.context),
        }
        if self.stage is not None:
            payload["stage"] = self.stage
        if self.hint is not None:
            payload["hint"] = self.hint
        return payload


class ValidationError(FwEmbedError):
    def __init__(
        self,
        message: str,
        *,
        hint: str | None = None,
        context: Mapping[str, str] | None = None,
    ) -> None:
        super().__init__(message, code=ErrorCode.VALIDATION, hint=hint, context=context)


class AnalysisError(FwEmbedError):
    def __init__(
        self,
        message: str,
        *,
        hint: str | None = None,
        context: Mapping[str, str] | None = None,
    ) -> None:
        super().__init__(message, code=ErrorCode.ANALYSIS, hint=hint, context=context)


class CompileError(FwEmbedError):
    def __init__(
        self,
        message: str,
        *,
        hint: str | None = None,
        context: Mapping[str, str] | None = None,
    ) -> None:
        super().__init__(message, code=ErrorCode.COMPILE, hint=hint, context=context)


class MergeError(FwEmbedError):
    def __init__(
        self,
        message: str,
        *,
        hint: str | None = None,
        context: Mapping[str, str] | None = None,
    ) -> None:
        super().__init__(message, code=ErrorCode.MERGE, hint=hint, context=context)


class InstallError(FwEmbedError):
    def __init__(
        self,
        message: str,
        *,
        hint: str | None = None,
        context: Mapping[str, str] | None = None,
    ) -> None:
        super().__init__(message, code=ErrorCode.INSTALL, hint=hint, context=context)


class EmbedError(FwEmbedError):
    def __init__(
        self,
        message: str,
        *,
        hint: str | None = None,
        context: Mapping[str, str] | None = None,
    ) -> None:
        super().__init__(message, code=ErrorCode.EMBED, hint=hint, context=context)


class ToolchainError(FwEmbedError):
    def __init__(
        self,
        message: str,
        *,
        hint: str | None = None,
        context: Mapping[str, str] | None = None,
    ) -> None:
        super().__init__(message, code=ErrorCode.TOOLCHAIN, hint=hint, context=context)


__all__ = [
    "AnalysisError",
    "CompileError",
    "EmbedError",
    "ErrorCode",
    "FwEmbedError",
    "InstallError",
    "MergeError",
    "ToolchainError",
    "ValidationError",
]
