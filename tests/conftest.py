"""Shared test fixtures."""

from __future__ import annotations

import subprocess
from collections.abc import Callable
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import pytest


@dataclass
class FakeRun:
    """Stand-in for ``subprocess.run`` that records every invocation."""

    returncode: int = 0
    output: str = ""
    on_call: Callable[[list[str]], None] | None = None
    calls: list[list[str]] = field(default_factory=list)
    kwargs: list[dict[str, Any]] = field(default_factory=list)

    def __call__(self, cmd: list[str], **kwargs: Any) -> subprocess.CompletedProcess[str]:
        self.calls.append(list(cmd))
        self.kwargs.append(kwargs)
        if self.on_call is not None:
            self.on_call(list(cmd))
        return subprocess.CompletedProcess(cmd, self.returncode, stdout=self.output)


def _refuse_subprocess(*args: Any, **kwargs: Any) -> None:
    raise AssertionError(f"unexpected subprocess call: {args!r}")


@pytest.fixture
def no_subprocess(monkeypatch: pytest.MonkeyPatch) -> None:
    """Fail the test if anything tries to spawn a process."""
    monkeypatch.setattr("fwembed.compiler.subprocess.run", _refuse_subprocess)


@pytest.fixture
def fake_run(monkeypatch: pytest.MonkeyPatch) -> FakeRun:
    runner = FakeRun()
    monkeypatch.setattr("fwembed.compiler.subprocess.run", runner)
    return runner


@pytest.fixture
def make_bundle(tmp_path: Path) -> Callable[..., Path]:
    """Create ``<tmp>/<parent>/<name>.framework`` with a binary and Modules dir."""

    def _make(
        name: str = "SampleKit",
        *,
        parent: str = "build",
        layout: str = "modern",
        binary: bytes = b"original-binary",
        modules: bool = True,
    ) -> Path:
        bundle = tmp_path / parent / f"{name}.framework"
        if layout == "modern":
            bundle.mkdir(parents=True)
            (bundle / name).write_bytes(binary)
            if modules:
                (bundle / "Modules").mkdir()
        else:
            versioned = bundle / "Versions" / "A"
            versioned.mkdir(parents=True)
            (versioned / name).write_bytes(binary)
            if modules:
                (versioned / "Modules").mkdir()
        return bundle

    return _make


@pytest.fixture
def write_tool(tmp_path: Path) -> Callable[[str, str], Path]:
    """Write an executable ``sh`` script under ``<tmp>/tools`` and return its path."""

    def _write(name: str, body: str) -> Path:
        tools = tmp_path / "tools"
        tools.mkdir(exist_ok=True)
        script = tools / name
        script.write_text("#!/bin/sh\n" + body, encoding="utf-8")
        script.chmod(0o755)
        return script

    return _write
