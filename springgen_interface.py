#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
springgen command line interface.

Run one interface to:
- generate the CRUD layers for every entity of one or more YAML configs
- validate configs without writing anything
"""
from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import List, Optional

from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from springgen import (
    CodeGenerator,
    ConfigError,
    GenerationError,
    GenerationReport,
    OutputRoots,
    OverridePolicy,
    Schema,
    SchemaValidationError,
)
from springgen.loader import load_all
from springgen.naming import derive_names, id_field

log = logging.getLogger("springgen")

console = Console()

EXIT_OK = 0
EXIT_GENERATION_ERROR = 1
EXIT_CONFIG_ERROR = 2

DEFAULT_BASE_DIR = "target"


def setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )


def _resolve_roots(args: argparse.Namespace, parser: argparse.ArgumentParser) -> OutputRoots:
    explicit = [args.main_root, args.test_root, args.resource_root]
    if any(explicit):
        if not all(explicit):
            parser.error("--main-root, --test-root and --resource-root must be given together")
        if args.base_dir:
            parser.error("--base-dir cannot be combined with explicit roots")
        return OutputRoots(
            main=Path(args.main_root).expanduser(),
            test=Path(args.test_root).expanduser(),
            resources=Path(args.resource_root).expanduser(),
        )
    return OutputRoots.under(Path(args.base_dir or DEFAULT_BASE_DIR).expanduser())


def _load(configs: List[str]) -> List[Schema]:
    return load_all(Path(c).expanduser() for c in configs)


def show_schemas(schemas: List[Schema]) -> None:
    t = Table(title="Entities")
    t.add_column("#", justify="right")
    t.add_column("Entity")
    t.add_column("Package")
    t.add_column("Table")
    t.add_column("ID")
    t.add_column("Fields", justify="right")
    for i, s in enumerate(schemas, start=1):
        f = id_field(s)
        t.add_row(str(i), s.entity_name, s.package_name, derive_names(s).table, f"{f.name}:{f.type}", str(len(s.fields)))
    console.print(t)


def show_reports(reports: List[GenerationReport]) -> None:
    dry = any(r.dry_run for r in reports)
    t = Table(title="Generated artifacts (dry run)" if dry else "Generated artifacts")
    t.add_column("Entity")
    t.add_column("Kind")
    t.add_column("Action")
    t.add_column("File")
    t.add_column("Reason")
    for r in reports:
        for o in r.outcomes:
            t.add_row(r.entity, o.artifact.kind.value, o.action.value, str(o.path), o.reason)
    console.print(t)


def run_generate(args: argparse.Namespace, parser: argparse.ArgumentParser) -> int:
    if args.skip:
        log.info("Code generation skipped")
        return EXIT_OK

    roots = _resolve_roots(args, parser)
    policy = OverridePolicy(skip_if_exists=not args.no_skip_if_exists, force=args.force)
    try:
        schemas = _load(args.configs)
    except (ConfigError, SchemaValidationError) as e:
        log.error("%s", e)
        return EXIT_CONFIG_ERROR

    gen = CodeGenerator(roots, policy, dry_run=args.dry_run)
    reports: List[GenerationReport] = []
    try:
        for schema in schemas:
            reports.append(gen.generate_all(schema))
    except SchemaValidationError as e:
        log.error("%s", e)
        return EXIT_CONFIG_ERROR
    except GenerationError as e:
        log.error("Generation failed: %s", e)
        return EXIT_GENERATION_ERROR
    finally:
        if reports:
            show_reports(reports)
    return EXIT_OK


def run_validate(args: argparse.Namespace) -> int:
    try:
        schemas = _load(args.configs)
    except (ConfigError, SchemaValidationError) as e:
        log.error("%s", e)
        return EXIT_CONFIG_ERROR
    show_schemas(schemas)
    log.info("%d entity definition(s) valid", len(schemas))
    return EXIT_OK


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Spring Boot CRUD generator")
    sub = parser.add_subparsers(dest="command", required=True)

    def add_common(p: argparse.ArgumentParser) -> None:
        p.add_argument("configs", nargs="+", metavar="CONFIG", help="YAML entity configuration file(s)")
        p.add_argument("--verbose", "-v", action="store_true", help="Debug logging")

    gen = sub.add_parser("generate", help="Generate migration, entity, repository, service and controller")
    add_common(gen)
    gen.add_argument("--base-dir", help=f"Build directory for Maven-style generated roots (default: {DEFAULT_BASE_DIR})")
    gen.add_argument("--main-root", help="Java sources root")
    gen.add_argument("--test-root", help="Java test sources root")
    gen.add_argument("--resource-root", help="Resources root (migrations)")
    gen.add_argument("--force", action="store_true", help="Overwrite extensible artifacts")
    gen.add_argument(
        "--no-skip-if-exists",
        action="store_true",
        help="Rewrite extensible artifacts that already exist",
    )
    gen.add_argument("--dry-run", action="store_true", help="Do not write files")
    gen.add_argument("--skip", action="store_true", help="Skip code generation entirely")

    val = sub.add_parser("validate", help="Load and validate configuration only")
    add_common(val)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    setup_logging(args.verbose)

    if args.command == "generate":
        return run_generate(args, parser)
    if args.command == "validate":
        return run_validate(args)

    parser.print_help()
    return 1


if __name__ == "__main__":
    raise SystemExit(main())
