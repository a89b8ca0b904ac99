"""CLI entrypoint for the round-robin remediator."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from pydantic import SecretStr, ValidationError
from rich.console import Console
from rich.logging import RichHandler
from rich.prompt import Prompt

from rr_remediator import __version__
from rr_remediator.config import Settings, get_settings
from rr_remediator.errors import RemediatorError
from rr_remediator.workflow import print_result, run_workflow


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description=(
            "Set round-robin multipathing to switch paths after every command "
            "on all volumes of a vSphere cluster."
        ),
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    parser.add_argument(
        "server",
        help="vCenter hostname or FQDN",
    )
    parser.add_argument(
        "--cluster",
        "-c",
        default=None,
        help="Cluster name (default: from env, otherwise prompted)",
    )
    parser.add_argument(
        "--user",
        "-u",
        default=None,
        help="vCenter user (default: from env, otherwise prompted)",
    )
    parser.add_argument(
        "--port",
        type=int,
        default=None,
        help="vCenter HTTPS port (default: from env or 443)",
    )
    parser.add_argument(
        "--insecure",
        action="store_true",
        help="Do not verify the vCenter certificate",
    )
    parser.add_argument(
        "--output-dir",
        "-o",
        type=Path,
        default=None,
        help="Directory for CSV reports (default: from env or current directory)",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Only report; do not change any volume",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable verbose logging",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    return parser.parse_args(argv)


def _apply_args(settings: Settings, args: argparse.Namespace) -> Settings:
    """Return settings with CLI flags applied and missing inputs prompted for."""
    updates: dict[str, object] = {"server": args.server}
    if args.port is not None:
        updates["port"] = args.port
    if args.insecure:
        updates["disable_ssl_verification"] = True
    if args.output_dir is not None:
        updates["output_dir"] = args.output_dir
    if args.dry_run:
        updates["dry_run"] = True

    username = args.user or settings.username or Prompt.ask(f"User for {args.server}")
    updates["username"] = username
    if settings.password is None:
        updates["password"] = SecretStr(Prompt.ask(f"Password for {username}", password=True))
    cluster = args.cluster or settings.cluster or Prompt.ask("Cluster name")
    updates["cluster"] = cluster
    return Settings.model_validate({**settings.model_dump(), **updates})


def main(argv: list[str] | None = None) -> int:
    """Entrypoint for rr-remediator CLI."""
    args = _parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(rich_tracebacks=True)],
    )
    logger = logging.getLogger("rr_remediator")
    if not args.verbose:
        logger.setLevel(logging.WARNING)

    try:
        settings = _apply_args(get_settings(), args)
    except ValidationError as e:
        print(f"Error: invalid configuration: {e}", file=sys.stderr)
        return 1
    except (EOFError, KeyboardInterrupt):
        print(
            "Error: input aborted; pass --user, --cluster and RR_REMEDIATOR_PASSWORD "
            "when not running interactively",
            file=sys.stderr,
        )
        return 1

    try:
        result = run_workflow(settings=settings)
        print_result(result, Console())
        return 0
    except RemediatorError as e:
        print(f"Error: {e.message}", file=sys.stderr)
        return 1
    except Exception as e:
        logging.exception("Remediation failed")
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
