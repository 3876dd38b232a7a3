"""Command-line entrypoint: ``fwembed embed`` and ``fwembed analyze``."""

from __future__ import annotations

import argparse
import json
import sys
from collections.abc import Sequence
from pathlib import Path

from fwembed.analyzer import BundleAnalyzer
from fwembed.embedder import EmbeddingOrchestrator, collect_sources
from fwembed.errors import FwEmbedError
from fwembed.models import EmbedConfig, EmbedSuccess, Logger
from fwembed.observability import StructuredLogger, build_report
from fwembed.toolchain import ToolchainConfig, detect_sdk_path, ensure_tool

BUILD_DIR_NAME = ".fwembed-build"


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="fwembed",
        description="Embed compiled overlay sources into an existing framework bundle.",
    )
    commands = parser.add_subparsers(dest="command", required=True)

    embed = commands.add_parser("embed", help="compile, merge and install overlay sources")
    embed.add_argument("bundle", type=Path)
    embed.add_argument("sources", type=Path, help="directory of interface-source files")
    embed.add_argument("--sdk", default=None, help="SDK root; auto-detected when omitted")
    embed.add_argument("--work-dir", type=Path, default=None)
    embed.add_argument(
        "--dry-run",
        action="store_true",
        help="log the commands without running them; skips SDK auto-detection",
    )
    embed.add_argument("--report", type=Path, default=None, help="write a JSON run report")
    embed.add_argument("--log-jsonl", type=Path, default=None)

    analyze = commands.add_parser("analyze", help="print recovered bundle metadata")
    analyze.add_argument("bundle", type=Path)
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    args = _build_parser().parse_args(argv)
    toolchain = ToolchainConfig.from_env()
    if args.command == "analyze":
        return _analyze(args, toolchain)
    return _embed(args, toolchain)


def _analyze(args: argparse.Namespace, toolchain: ToolchainConfig) -> int:
    try:
        info = BundleAnalyzer(toolchain=toolchain).analyze(args.bundle)
    except FwEmbedError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1
    print(json.dumps(info.to_dict(), indent=2, sort_keys=True))
    return 0


def _embed(args: argparse.Namespace, toolchain: ToolchainConfig) -> int:
    bundle_dir = args.bundle.absolute()
    sources = collect_sources(args.sources)
    if not sources:
        print(f"fwembed: no interface sources found in {args.sources}")
        return 0

    if not args.dry_run:
        try:
            ensure_tool(toolchain.compiler, operation="compile")
            ensure_tool(toolchain.linker, operation="merge")
        except FwEmbedError as exc:
            print(f"error: {exc}", file=sys.stderr)
            return 1

    sdk_path = args.sdk
    if sdk_path is None and not args.dry_run:
        sdk_path = detect_sdk_path(bundle_dir, toolchain)

    logger = StructuredLogger()
    config = EmbedConfig(
        sdk_path=sdk_path,
        working_directory=args.work_dir or bundle_dir.parent / BUILD_DIR_NAME,
        dry_run=args.dry_run,
        logger=_printing(logger.bind(operation="embed", bundle=bundle_dir.name)),
    )

    orchestrator = EmbeddingOrchestrator(toolchain)
    result = orchestrator.embed(bundle_dir, sources, config)

    if args.report is not None:
        info = orchestrator.analyzer.analyze_or_none(bundle_dir)
        build_report(info=info, sources=sources, result=result, dry_run=args.dry_run).to_json(
            args.report
        )
    if args.log_jsonl is not None:
        logger.to_json_lines(args.log_jsonl)

    if isinstance(result, EmbedSuccess):
        print(
            f"fwembed: embedded {result.sources_embedded} source files into {result.bundle_name}"
        )
        return 0
    try:
        result.raise_for_error()
    except FwEmbedError as exc:
        print(f"error: {exc}", file=sys.stderr)
    return 1


def _printing(record: Logger) -> Logger:
    def _emit(message: str) -> None:
        record(message)
        print(f"fwembed: {message}")

    return _emit


if __name__ == "__main__":
    raise SystemExit(main())
