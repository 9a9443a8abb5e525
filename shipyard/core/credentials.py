from __future__ import annotations

import os
from dataclasses import dataclass, field

from shipyard.core.errors import AuthError


DEFAULT_TOKEN_ENV = "CARGO_REGISTRY_TOKEN"


@dataclass(frozen=True)
class Credential:
    """Opaque registry token shared read-only by every publish call."""
    env_name: str
    value: str = field(repr=False)

    def __str__(self) -> str:
        return "[REDACTED]"


def load_credential(env_name: str = DEFAULT_TOKEN_ENV, environ: dict | None = None) -> Credential:
    """Read the registry token once at startup.

    Raises:
        AuthError: When the variable is unset or blank.
    """
    source = os.environ if environ is None else environ
    value = (source.get(env_name) or "").strip()
    if not value:
        raise AuthError(f"Registry token not found: set {env_name}")
    return Credential(env_name=env_name, value=value)
