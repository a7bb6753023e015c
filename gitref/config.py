"""Configuration management for gitref.toml."""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import tomli
import tomli_w

from gitref.constants import (
    CONFIG_TABLE,
    DEFAULT_HTTP_TIMEOUT,
    DEFAULT_TOKEN_ENV,
    TIMEOUT_ENV,
)
from gitref.exceptions import ConfigParseError, ConfigValidationError
from gitref.log import get_logger

logger = get_logger(__name__)


def _positive_int(name: str, value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ConfigValidationError(f"'{name}' must be an integer, got {value!r}")
    if value <= 0:
        raise ConfigValidationError(f"'{name}' must be greater than 0, got {value}")
    return value


@dataclass
class GitrefConfig:
    """Settings shared by the access classifier, cloner, and extractor.

    Example:
        [gitref]
        http_timeout = 10
        client_name = "my-tool"
        scratch_root = "/var/tmp/gitref"

        [gitref.token_env]
        "github.com" = "MY_GITHUB_TOKEN"
    """

    http_timeout: int = DEFAULT_HTTP_TIMEOUT
    client_name: str = ""
    scratch_root: Path | None = None
    token_env: dict[str, str] = field(default_factory=lambda: dict(DEFAULT_TOKEN_ENV))

    def __post_init__(self) -> None:
        _positive_int("http_timeout", self.http_timeout)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "GitrefConfig":
        """Create a GitrefConfig from the [gitref] TOML table."""
        known = {"http_timeout", "client_name", "scratch_root", "token_env"}
        unknown = set(data) - known
        if unknown:
            raise ConfigValidationError(f"Unknown gitref setting(s): {', '.join(sorted(unknown))}")

        token_env = dict(DEFAULT_TOKEN_ENV)
        overrides = data.get("token_env", {})
        if not isinstance(overrides, dict) or not all(
            isinstance(v, str) for v in overrides.values()
        ):
            raise ConfigValidationError("'token_env' must map hosts to environment variable names")
        token_env.update(overrides)

        client_name = data.get("client_name", "")
        if not isinstance(client_name, str):
            raise ConfigValidationError(f"'client_name' must be a string, got {client_name!r}")

        scratch_root = data.get("scratch_root")
        return cls(
            http_timeout=_positive_int("http_timeout", data.get("http_timeout", DEFAULT_HTTP_TIMEOUT)),
            client_name=client_name,
            scratch_root=Path(scratch_root) if scratch_root else None,
            token_env=token_env,
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to a TOML-serializable dict."""
        result: dict[str, Any] = {"http_timeout": self.http_timeout}
        if self.client_name:
            result["client_name"] = self.client_name
        if self.scratch_root:
            result["scratch_root"] = str(self.scratch_root)
        overrides = {
            host: var for host, var in self.token_env.items() if DEFAULT_TOKEN_ENV.get(host) != var
        }
        if overrides:
            result["token_env"] = overrides
        return result

    @classmethod
    def load(cls, path: Path) -> "GitrefConfig":
        """Load configuration from a gitref.toml file.

        A missing file yields the defaults.

        Raises:
            ConfigParseError: If the file is not valid TOML
            ConfigValidationError: If a setting has an invalid value
        """
        if not path.exists():
            return cls()

        try:
            with open(path, "rb") as f:
                data = tomli.load(f)
        except tomli.TOMLDecodeError as e:
            raise ConfigParseError(f"Invalid TOML in {path}: {e}") from e

        return cls.from_dict(data.get(CONFIG_TABLE, {}))

    def save(self, path: Path) -> None:
        """Write the configuration to a gitref.toml file."""
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "wb") as f:
            tomli_w.dump({CONFIG_TABLE: self.to_dict()}, f)

    @classmethod
    def from_env(cls) -> "GitrefConfig":
        """Defaults, with the HTTP timeout taken from GITREF_HTTP_TIMEOUT if set."""
        raw = os.environ.get(TIMEOUT_ENV, "").strip()
        if not raw:
            return cls()
        try:
            timeout = int(raw)
        except ValueError as e:
            raise ConfigValidationError(f"{TIMEOUT_ENV} must be an integer, got {raw!r}") from e
        return cls(http_timeout=_positive_int(TIMEOUT_ENV, timeout))

    def resolve_timeout(self, timeout: int | None) -> int:
        """Return the probe timeout in seconds.

        ``None`` and non-positive overrides fall back to ``http_timeout``.
        """
        if timeout is None:
            return self.http_timeout
        if timeout <= 0:
            logger.debug("Invalid HTTP timeout %s passed in, using default value", timeout)
            return self.http_timeout
        logger.debug("HTTP request and response timeout overridden value is %ss", timeout)
        return timeout

    def token_from_env(self, host: str) -> str:
        """Token from the environment variable configured for ``host``, if any."""
        var = self.token_env.get(host)
        if not var:
            return ""
        return os.environ.get(var, "")
