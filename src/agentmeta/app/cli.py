from __future__ import annotations

import argparse
import logging
import sys
from os import getenv
from pathlib import Path
from typing import Optional, Sequence

import yaml
from dotenv import load_dotenv
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from agentmeta.adapters.validation.allow_list import AllowListValidator
from agentmeta.app.container import build_container
from agentmeta.app.pipeline import parse_agent_file
from agentmeta.domain.errors import AgentMetaError
from agentmeta.domain.models import AgentDefinition, LoadReport
from agentmeta.domain.schema import KEY_SYSTEM
from agentmeta.settings import load_settings
from agentmeta.utils.jsonify import dumps_metadata

EXIT_OK = 0
EXIT_ERROR = 1
EXIT_NO_HEADER = 2

console = Console()
err_console = Console(stderr=True)


def build_argparser() -> argparse.ArgumentParser:
    # accepted before or after the subcommand; SUPPRESS keeps a subparser from resetting it
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument(
        "--settings",
        default=argparse.SUPPRESS,
        help="TOML settings file (default: $AGENTMETA_SETTINGS)",
    )

    ap = argparse.ArgumentParser(
        prog="agentmeta",
        description="Extract agent metadata from frontmatter and Org files.",
        parents=[common],
    )
    ap.add_argument("-v", "--verbose", action="store_true", help="Debug logging")

    sub = ap.add_subparsers(dest="command", required=True)

    show = sub.add_parser("show", parents=[common], help="Parse one file and print its metadata")
    show.add_argument("path", type=Path)
    show.add_argument(
        "--allow",
        action="append",
        default=None,
        metavar="KEY",
        help="Allowed metadata key (repeatable; replaces the configured allow-list)",
    )
    show.add_argument("--format", choices=("json", "table"), default="json")

    scan = sub.add_parser("scan", parents=[common], help="Load every agent definition under the given paths")
    scan.add_argument("paths", nargs="+", help="Files, directories or relative globs")
    return ap


def _print_metadata_table(path: Path, result: dict) -> None:
    table = Table(title=str(path), show_lines=True)
    table.add_column("key", style="bold cyan")
    table.add_column("value")
    for key, value in result.items():
        if key == KEY_SYSTEM:
            continue
        table.add_row(key, dumps_metadata(value))
    console.print(table)
    console.print(result.get(KEY_SYSTEM, ""), markup=False, highlight=False, soft_wrap=True)


def _print_scan(agents: list[AgentDefinition], report: LoadReport) -> None:
    table = Table(title="Agents")
    table.add_column("name", style="bold cyan", no_wrap=True)
    table.add_column("backend")
    table.add_column("model")
    table.add_column("tools")
    table.add_column("source", style="dim", overflow="fold")
    for agent in agents:
        table.add_row(
            agent.name,
            agent.backend or "",
            agent.model or "",
            " ".join(agent.tools),
            str(agent.source or ""),
        )
    console.print(table)

    console.print(
        f"scanned={report.scanned} loaded={report.loaded} "
        f"no_header={report.skipped_no_header} hidden={report.skipped_hidden} "
        f"other_ext={report.skipped_extension} failed={report.failed}",
        soft_wrap=True,
    )
    for failure in report.failures:
        err_console.print(
            f"[red]failed[/red] {escape(str(failure.path))}: {escape(failure.message)}",
            highlight=False,
            soft_wrap=True,
        )


def _cmd_show(args: argparse.Namespace, settings_path: Optional[str]) -> int:
    settings = load_settings(settings_path)
    validator = AllowListValidator.of(args.allow) if args.allow else None
    c = build_container(settings, validator=validator)

    result = parse_agent_file(args.path, c.validator, decoder=c.decoder, engine=c.engine)
    if result is None:
        err_console.print(f"No metadata header found in {args.path}", markup=False, soft_wrap=True)
        return EXIT_NO_HEADER

    if args.format == "table":
        _print_metadata_table(args.path, result)
    else:
        print(dumps_metadata(result, indent=2))
    return EXIT_OK


def _cmd_scan(args: argparse.Namespace, settings_path: Optional[str]) -> int:
    c = build_container(load_settings(settings_path))
    agents, report = c.loader.load(args.paths)
    _print_scan(agents, report)
    return EXIT_ERROR if report.failures else EXIT_OK


def main(argv: Optional[Sequence[str]] = None) -> int:
    load_dotenv()
    args = build_argparser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    settings_path = getattr(args, "settings", None) or getenv("AGENTMETA_SETTINGS") or None

    try:
        if args.command == "show":
            return _cmd_show(args, settings_path)
        return _cmd_scan(args, settings_path)
    except (AgentMetaError, yaml.YAMLError, OSError, ValueError) as e:
        err_console.print(f"[red]error:[/red] {escape(str(e))}", highlight=False, soft_wrap=True)
        return EXIT_ERROR


if __name__ == "__main__":
    sys.exit(main())
