"""Structured logging and run-report helpers."""

from __future__ import annotations

import json
from collections.abc import Sequence
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import cbor2

from fwembed.models import BundleInfo, EmbedResult, EmbedSuccess, Logger


@dataclass(slots=True)
class StructuredLogger:
    records: list[dict[str, Any]] = field(default_factory=list)

    def log(
        self,
        *,
        operation: str,
        stage: str | None,
        bundle: str | None,
        message: str,
        level: str = "info",
        extra: dict[str, Any] | None = None,
    ) -> None:
        record: dict[str, Any] = {
            "level": level,
            "operation": operation,
            "stage": stage,
            "bundle": bundle,
            "message": message,
        }
        if extra is not None:
            record["extra"] = extra
        self.records.append(record)

    def bind(
        self,
        *,
        operation: str,
        stage: str | None = None,
        bundle: str | None = None,
    ) -> Logger:
        """Return a ``(message) -> None`` callback that records under fixed fields."""

        def _emit(message: str) -> None:
            self.log(operation=operation, stage=stage, bundle=bundle, message=message)

        return _emit

    def records_for_bundle(self, bundle: str) -> list[dict[str, Any]]:
        return [record for record in self.records if record.get("bundle") == bundle]

    def messages(self) -> list[str]:
        return [str(record["message"]) for record in self.records]

    def to_json_lines(self, path: str | Path) -> Path:
        output_path = Path(path)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        lines = [json.dumps(record, sort_keys=True) for record in self.records]
        output_path.write_text("\n".join(lines) + "\n", encoding="utf-8")
        return output_path


@dataclass(frozen=True, slots=True)
class EmbedReport:
    """Machine-readable summary of one embedding run."""

    bundle: str | None
    target_triple: str | None
    dry_run: bool
    ok: bool
    message: str
    stage: str | None = None
    binary_path: str | None = None
    sources: tuple[str, ...] = ()
    schema_version: int = 1

    def to_json(self, path: str | Path | None = None) -> str:
        encoded = json.dumps(self._payload(), indent=2, sort_keys=True) + "\n"
        if path is not None:
            Path(path).write_text(encoded, encoding="utf-8")
        return encoded

    def to_cbor(self, path: str | Path | None = None) -> bytes:
        encoded = cbor2.dumps(self._payload(), canonical=True)
        if path is not None:
            Path(path).write_bytes(encoded)
        return encoded

    def _payload(self) -> dict[str, object]:
        return {
            "schema_version": self.schema_version,
            "bundle": self.bundle,
            "target_triple": self.target_triple,
            "dry_run": self.dry_run,
            "ok": self.ok,
            "message": self.message,
            "stage": self.stage,
            "binary_path": self.binary_path,
            "sources": list(self.sources),
        }


def build_report(
    *,
    info: BundleInfo | None,
    sources: Sequence[Path],
    result: EmbedResult,
    dry_run: bool,
) -> EmbedReport:
    if isinstance(result, EmbedSuccess):
        return EmbedReport(
            bundle=result.bundle_name,
            target_triple=info.target_triple if info is not None else None,
            dry_run=dry_run,
            ok=True,
            message=f"Embedded {result.sources_embedded} source files",
            binary_path=str(result.binary_path),
            sources=tuple(str(path) for path in sources),
        )
    return EmbedReport(
        bundle=info.name if info is not None else None,
        target_triple=info.target_triple if info is not None else None,
        dry_run=dry_run,
        ok=False,
        message=result.message,
        stage=result.stage.value if result.stage is not None else None,
        sources=tuple(str(path) for path in sources),
    )


def emit(logger: Logger | None, message: str) -> None:
    """Forward *message* to an optional pipeline logger callback."""
    if logger is not None:
        logger(message)
