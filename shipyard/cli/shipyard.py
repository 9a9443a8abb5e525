from __future__ import annotations

"""shipyard command-line interface entrypoint."""

import argparse
import json
import os
import sys

from pathlib import Path

from shipyard.adapters.build_noop import NoopBuildStep
from shipyard.adapters.cargo_publisher import CargoPublisher
from shipyard.adapters.publisher_dry_run import DryRunPublisher
from shipyard.adapters.waiter_noop import NoopWaiter
from shipyard.adapters.waiter_timed import TimedWaiter
from shipyard.core.cancellation import CancelToken, install_signal_handlers
from shipyard.core.credentials import Credential, load_credential
from shipyard.core.errors import AuthError, ConfigError, GraphError
from shipyard.core.graph import build_plan
from shipyard.core.logging_config import LOG_FORMATS, configure_logging
from shipyard.core.orchestrator import Orchestrator
from shipyard.core.redaction import redact_data
from shipyard.core.release_config import ReleaseConfig
from shipyard.core.report import build_run_summary, render_run_report
from shipyard.core.retry import ExponentialBackoff
from shipyard.core.version import get_shipyard_version


EXIT_COMPLETED = 0
EXIT_ABORTED = 1
EXIT_USAGE = 2


def _env_bool(name: str, default: bool) -> bool:
    """Read a boolean from the environment with a safe default."""
    value = os.environ.get(name)
    if value is None:
        return default
    return value.lower() in {"1", "true", "yes"}


def _parse_bool(value: str | None) -> bool:
    """Parse optional boolean flags that allow an implicit True value."""
    if value is None:
        return True
    return value.lower() in {"1", "true", "yes"}


def _load_config(args: argparse.Namespace) -> ReleaseConfig:
    config = ReleaseConfig.from_file(args.config) if args.config else ReleaseConfig()
    if getattr(args, "token_env", None):
        config.token_env = args.token_env
    if getattr(args, "propagation_delay", None) is not None:
        config.propagation_delay_s = args.propagation_delay
    if getattr(args, "cargo", None):
        config.cargo = args.cargo
    config.validate()
    return config


def plan_command(args: argparse.Namespace) -> int:
    """Print the publish order without touching the registry."""
    try:
        config = _load_config(args)
        plan = build_plan(config.units)
    except (ConfigError, GraphError) as exc:
        print(str(exc), file=sys.stderr)
        return EXIT_USAGE
    for index, unit in enumerate(plan, start=1):
        flags = "" if unit.verify else "  (no-verify)"
        print(f"{index}. {unit.name}\t{unit.location}{flags}")
    return EXIT_COMPLETED


def publish_command(args: argparse.Namespace) -> int:
    """Run the full release pipeline for the configured unit set."""
    try:
        config = _load_config(args)
        plan = build_plan(config.units)
    except (ConfigError, GraphError) as exc:
        print(str(exc), file=sys.stderr)
        return EXIT_USAGE

    cancel = CancelToken()
    if args.dry_run:
        token = Credential(env_name=config.token_env, value="dry-run")
        publisher = DryRunPublisher()
        waiter = NoopWaiter()
    else:
        try:
            token = load_credential(config.token_env)
        except AuthError as exc:
            print(str(exc), file=sys.stderr)
            return EXIT_USAGE
        publisher = CargoPublisher(
            cargo=config.cargo,
            workdir=config.workdir,
            extra_args=config.publish_args,
            timeout_s=config.publish_timeout_s,
            backoff=ExponentialBackoff(
                max_attempts=config.max_attempts,
                base_delay=config.retry_base_delay_s,
                max_delay=config.retry_max_delay_s,
            ),
        )
        waiter = TimedWaiter(cancel=cancel)
        install_signal_handlers(cancel)

    orchestrator = Orchestrator(
        publisher,
        waiter,
        build_step=NoopBuildStep(),
        propagation_delay=config.propagation_delay_s,
        cancel=cancel,
    )
    try:
        run = orchestrator.run(plan, token)
    except AuthError as exc:
        print(str(exc), file=sys.stderr)
        return EXIT_USAGE

    report = render_run_report(run)
    exit_code = EXIT_COMPLETED if run.is_success else EXIT_ABORTED
    print(report, file=sys.stdout if run.is_success else sys.stderr)

    if args.summary_json:
        summary = redact_data(build_run_summary(run), (token.value,))
        summary_path = Path(args.summary_json)
        try:
            summary_path.parent.mkdir(parents=True, exist_ok=True)
            summary_path.write_text(json.dumps(summary, indent=2, sort_keys=True) + "\n", encoding="utf-8")
        except OSError as exc:
            print(f"Failed to write run summary: {exc}", file=sys.stderr)
    return exit_code


def _add_config_argument(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--config",
        default=None,
        help="Path to release.yaml (defaults to the built-in manifest/convert/runtime set)",
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="shipyard")
    parser.add_argument("--version", action="version", version=f"%(prog)s {get_shipyard_version()}")
    parser.add_argument(
        "--log-level",
        default=os.environ.get("SHIPYARD_LOG_LEVEL", "INFO"),
        help="Logging level (DEBUG, INFO, WARNING, ERROR)",
    )
    parser.add_argument(
        "--log-format",
        choices=LOG_FORMATS,
        default=os.environ.get("SHIPYARD_LOG_FORMAT", "console"),
        help="Log renderer",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    publish_parser = subparsers.add_parser("publish", help="Publish every unit in dependency order")
    _add_config_argument(publish_parser)
    publish_parser.add_argument(
        "--token-env",
        default=None,
        help="Environment variable holding the registry token",
    )
    publish_parser.add_argument(
        "--propagation-delay",
        type=float,
        default=None,
        help="Seconds to wait after each non-final publish",
    )
    publish_parser.add_argument("--cargo", default=None, help="Path to the cargo executable")
    publish_parser.add_argument(
        "--dry-run",
        nargs="?",
        const=True,
        default=_env_bool("DRY_RUN", False),
        type=_parse_bool,
        help="Walk the plan without publishing (true/false)",
    )
    publish_parser.add_argument("--summary-json", default=None, help="Write a JSON run summary to this path")
    publish_parser.set_defaults(func=publish_command)

    plan_parser = subparsers.add_parser("plan", help="Show the publish order")
    _add_config_argument(plan_parser)
    plan_parser.set_defaults(func=plan_command)
    return parser


def main(argv: list[str] | None = None) -> int:
    """CLI entrypoint and command registration."""
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.log_level, args.log_format)
    return args.func(args)


if __name__ == "__main__":
    raise SystemExit(main())
