from __future__ import annotations

import os
import re
import subprocess
import time
from pathlib import Path
from typing import Callable, Sequence

import structlog

from shipyard.core.credentials import Credential
from shipyard.core.errors import AlreadyPublishedError, RegistryError
from shipyard.core.models import PublishableUnit, PublishOutcome
from shipyard.core.redaction import redact_text
from shipyard.core.retry import ExponentialBackoff


logger = structlog.get_logger(__name__)

CARGO_TOKEN_ENV = "CARGO_REGISTRY_TOKEN"
OUTPUT_TAIL_CHARS = 2000

_ALREADY_PUBLISHED = re.compile(
    r"crate version `?[^`\s]+`? is already uploaded|already exists on \S+ index",
    re.IGNORECASE,
)
_TRANSIENT = [
    re.compile(r"spurious network error", re.IGNORECASE),
    re.compile(r"timed? ?out", re.IGNORECASE),
    re.compile(r"connection (reset|refused|closed)", re.IGNORECASE),
    re.compile(r"failed to (send|get) request", re.IGNORECASE),
    re.compile(r"\b(status|HTTP)\s*50[0-4]\b", re.IGNORECASE),
    re.compile(r"(internal server error|bad gateway|service unavailable|gateway timeout)", re.IGNORECASE),
    re.compile(r"\b429\b|too many requests", re.IGNORECASE),
]


def classify_publish_failure(output: str) -> RegistryError:
    """Map cargo's error output onto the registry error taxonomy."""
    message = output.strip() or "cargo publish failed without output"
    if _ALREADY_PUBLISHED.search(output):
        return AlreadyPublishedError(message)
    transient = any(pattern.search(output) for pattern in _TRANSIENT)
    return RegistryError(message, transient=transient)


class CargoPublisher:
    """Publish units to a cargo registry by running ``cargo publish``.

    The token travels through the child environment only, never the argument
    list, and is scrubbed from any output that ends up in an outcome.
    """
    def __init__(
        self,
        cargo: str = "cargo",
        workdir: str | None = None,
        extra_args: Sequence[str] = (),
        timeout_s: float = 600.0,
        backoff: ExponentialBackoff | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.cargo = cargo
        self.workdir = workdir
        self.extra_args = list(extra_args)
        self.timeout_s = timeout_s
        self.backoff = backoff or ExponentialBackoff()
        self.sleep = sleep

    def command(self, unit: PublishableUnit) -> list[str]:
        command = [self.cargo, "publish", "--manifest-path", unit.location]
        if not unit.verify:
            command.append("--no-verify")
        command.extend(self.extra_args)
        return command

    def publish(self, unit: PublishableUnit, token: Credential) -> PublishOutcome:
        """Publish ``unit``, retrying transient registry faults with backoff.

        Notes:
            This method does not raise registry errors; they are converted
            into PublishOutcome values so the orchestrator stays linear.
        """
        attempt = 0
        while True:
            attempt += 1
            try:
                self._run_once(unit, token)
            except AlreadyPublishedError:
                return PublishOutcome.already_published(attempts=attempt)
            except RegistryError as exc:
                reason = redact_text(str(exc), (token.value,))
                if not exc.transient:
                    return PublishOutcome.failed(reason, attempts=attempt)
                if not self.backoff.should_retry(attempt):
                    return PublishOutcome.failed(
                        f"retry budget exhausted after {attempt} attempt(s): {reason}",
                        attempts=attempt,
                    )
                delay = self.backoff.next_delay(attempt - 1)
                logger.warning(
                    "publish_retry",
                    unit=unit.name,
                    attempt=attempt,
                    delay_s=round(delay, 2),
                    reason=reason.splitlines()[-1] if reason else "",
                )
                self.sleep(delay)
                continue
            return PublishOutcome.published(attempts=attempt)

    def _run_once(self, unit: PublishableUnit, token: Credential) -> None:
        env = os.environ.copy()
        env[CARGO_TOKEN_ENV] = token.value
        command = self.command(unit)
        logger.debug("cargo_publish", unit=unit.name, command=command, cwd=self.workdir)
        # A separate session keeps terminal signals away from an upload in flight.
        try:
            proc = subprocess.run(
                command,
                cwd=str(Path(self.workdir)) if self.workdir else None,
                env=env,
                capture_output=True,
                text=True,
                timeout=self.timeout_s,
                check=False,
                start_new_session=True,
            )
        except FileNotFoundError as exc:
            raise RegistryError(f"cargo executable not found: {self.cargo}") from exc
        except subprocess.TimeoutExpired as exc:
            raise RegistryError(
                f"cargo publish timed out after {self.timeout_s:g}s",
                transient=True,
            ) from exc

        if proc.returncode != 0:
            output = (proc.stderr or "")[-OUTPUT_TAIL_CHARS:]
            if not output.strip():
                output = (proc.stdout or "")[-OUTPUT_TAIL_CHARS:]
            raise classify_publish_failure(output)
