"""Test configuration and fixtures."""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable

import pytest

from gitref.exceptions import CommandExecutionError, TransportError
from gitref.runner import CommandType, validate_command


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line("markers", "e2e: end-to-end tests requiring network and git")


@pytest.fixture(autouse=True)
def skip_e2e_by_default(request):
    """Only run E2E tests when GITREF_E2E is set."""
    if request.node.get_closest_marker("e2e"):
        if os.environ.get("GITREF_E2E", "").lower() not in ("1", "true", "yes"):
            pytest.skip("E2E tests need GITREF_E2E=1")


@pytest.fixture(autouse=True)
def no_provider_tokens(monkeypatch):
    """Keep tokens from the developer's environment out of the tests."""
    for var in ("GITHUB_TOKEN", "GITLAB_TOKEN", "BITBUCKET_TOKEN", "GITREF_HTTP_TIMEOUT"):
        monkeypatch.delenv(var, raising=False)


@dataclass
class FakeTransport:
    """Transport answering from a table of url -> body.

    Requests for URLs not in ``responses`` fail like a 404. When ``accepted_tokens``
    is set, requests with any other token fail like a 401.
    """

    responses: dict[str, bytes] = field(default_factory=dict)
    accepted_tokens: set[str] | None = None
    calls: list[tuple[str, str, float]] = field(default_factory=list)

    def get(self, url: str, *, token: str = "", timeout: float) -> bytes:
        self.calls.append((url, token, timeout))
        if self.accepted_tokens is not None and token not in self.accepted_tokens:
            raise TransportError(f"failed to retrieve {url}, 401: Unauthorized", url=url, status_code=401)
        if url not in self.responses:
            raise TransportError(f"failed to retrieve {url}, 404: Not Found", url=url, status_code=404)
        return self.responses[url]


@dataclass
class RecordingRunner:
    """Process runner that records calls instead of spawning processes.

    ``on_run`` is called with the working directory and args, e.g. to write
    files the way a real clone would.
    """

    output: bytes = b""
    error: CommandExecutionError | None = None
    on_run: Callable[[Path, tuple[str, ...]], None] | None = None
    calls: list[tuple[Path, CommandType, tuple[str, ...]]] = field(default_factory=list)

    def execute(self, base_dir: Path, cmd, *args: str) -> bytes:
        command = validate_command(cmd)
        self.calls.append((base_dir, command, args))
        if self.error is not None:
            raise self.error
        if self.on_run is not None:
            self.on_run(Path(base_dir), args)
        return self.output


@pytest.fixture
def fake_transport() -> FakeTransport:
    return FakeTransport()


@pytest.fixture
def recording_runner() -> RecordingRunner:
    return RecordingRunner()


@pytest.fixture
def write_files():
    """Factory for ``on_run`` hooks that write files (relative path -> content)."""

    def _factory(files: dict[str, str]) -> Callable[[Path, tuple[str, ...]], None]:
        def _write(base_dir: Path, args: tuple[str, ...]) -> None:
            for rel_path, content in files.items():
                target = base_dir / rel_path
                target.parent.mkdir(parents=True, exist_ok=True)
                target.write_text(content)

        return _write

    return _factory
