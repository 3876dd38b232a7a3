import json
from collections.abc import Callable
from pathlib import Path

import pytest

from conftest import FakeRun
from fwembed.cli import main


def test_analyze_prints_bundle_metadata(
    make_bundle: Callable[..., Path],
    capsys: pytest.CaptureFixture[str],
) -> None:
    bundle = make_bundle("SampleKit", parent="bin/iosArm64/releaseFramework")

    exit_code = main(["analyze", str(bundle)])

    assert exit_code == 0
    payload = json.loads(capsys.readouterr().out)
    assert payload["name"] == "SampleKit"
    assert payload["target_triple"] == "arm64-apple-ios13.0"


def test_analyze_reports_errors(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    exit_code = main(["analyze", str(tmp_path / "Missing.framework")])

    assert exit_code == 1
    assert "does not exist" in capsys.readouterr().err


def test_embed_dry_run_writes_report_and_logs(
    tmp_path: Path,
    make_bundle: Callable[..., Path],
    no_subprocess: None,
) -> None:
    bundle = make_bundle("SampleKit")
    sources = tmp_path / "generated"
    sources.mkdir()
    (sources / "SampleKit+Flows.swift").write_text("// generated\n", encoding="utf-8")

    exit_code = main(
        [
            "embed",
            str(bundle),
            str(sources),
            "--sdk",
            "/sdk/MacOSX.sdk",
            "--dry-run",
            "--report",
            str(tmp_path / "report.json"),
            "--log-jsonl",
            str(tmp_path / "embed.jsonl"),
        ]
    )

    assert exit_code == 0
    report = json.loads((tmp_path / "report.json").read_text(encoding="utf-8"))
    assert report["ok"] is True
    assert report["dry_run"] is True
    assert report["bundle"] == "SampleKit"
    records = [
        json.loads(line)
        for line in (tmp_path / "embed.jsonl").read_text(encoding="utf-8").splitlines()
    ]
    assert any("-sdk /sdk/MacOSX.sdk" in record["message"] for record in records)
    assert not (bundle.parent / ".fwembed-build").exists()


def test_embed_without_sources_is_a_no_op(
    tmp_path: Path,
    make_bundle: Callable[..., Path],
    no_subprocess: None,
) -> None:
    bundle = make_bundle("SampleKit")

    assert main(["embed", str(bundle), str(tmp_path / "empty")]) == 0
    assert (bundle / "SampleKit").read_bytes() == b"original-binary"


def test_embed_failure_exits_nonzero(
    tmp_path: Path,
    make_bundle: Callable[..., Path],
    fake_run: FakeRun,
    monkeypatch: pytest.MonkeyPatch,
    capsys: pytest.CaptureFixture[str],
) -> None:
    monkeypatch.setattr("fwembed.toolchain.shutil.which", lambda tool: f"/usr/bin/{tool}")
    bundle = make_bundle("SampleKit")
    sources = tmp_path / "generated"
    sources.mkdir()
    (sources / "Broken.swift").write_text("let = \n", encoding="utf-8")
    fake_run.returncode = 1
    fake_run.output = "Broken.swift:1:5: error: expected pattern"

    exit_code = main(["embed", str(bundle), str(sources), "--sdk", "/sdk"])

    assert exit_code == 1
    err = capsys.readouterr().err
    assert "Compilation failed" in err
    assert "stage: compiling" in err
    assert (bundle / "SampleKit").read_bytes() == b"original-binary"


def test_embed_stops_when_toolchain_is_missing(
    tmp_path: Path,
    make_bundle: Callable[..., Path],
    monkeypatch: pytest.MonkeyPatch,
    capsys: pytest.CaptureFixture[str],
    no_subprocess: None,
) -> None:
    monkeypatch.setattr("fwembed.toolchain.shutil.which", lambda _: None)
    bundle = make_bundle("SampleKit")
    sources = tmp_path / "generated"
    sources.mkdir()
    (sources / "Flows.swift").write_text("// generated\n", encoding="utf-8")

    exit_code = main(["embed", str(bundle), str(sources), "--sdk", "/sdk"])

    assert exit_code == 1
    assert "`swiftc` is not in PATH" in capsys.readouterr().err
    assert (bundle / "SampleKit").read_bytes() == b"original-binary"


def test_embed_dry_run_skips_sdk_detection(
    tmp_path: Path,
    make_bundle: Callable[..., Path],
    no_subprocess: None,
    capsys: pytest.CaptureFixture[str],
) -> None:
    bundle = make_bundle("SampleKit")
    sources = tmp_path / "generated"
    sources.mkdir()
    (sources / "SampleKit+Flows.swift").write_text("// generated\n", encoding="utf-8")

    exit_code = main(["embed", str(bundle), str(sources), "--dry-run"])

    assert exit_code == 0
    out = capsys.readouterr().out
    assert "Would run: swiftc" in out
    assert " -sdk " not in out
