"""Tests for the access classifier and the HTTP transport."""

import logging

import httpx
import pytest

from gitref.access import AccessClassifier
from gitref.config import GitrefConfig
from gitref.exceptions import AuthProbeFailedError, TransportError
from gitref.reference import GitRef
from gitref.transport import HttpxTransport, Transport

GITHUB_REF = GitRef("https", "github.com", "devfile", "library", "main", "devfile.yaml", True)
GITHUB_API = "https://api.github.com/repos/devfile/library"


class TestIsPublic:
    """Test public/private classification."""

    def test_public_when_probe_succeeds(self, fake_transport):
        fake_transport.responses[GITHUB_API] = b'{"private": false}'
        classifier = AccessClassifier(transport=fake_transport)

        assert classifier.is_public(GITHUB_REF) is True

    def test_probe_is_unauthenticated(self, fake_transport):
        """is_public never sends a token, even if the reference carries one."""
        fake_transport.responses[GITHUB_API] = b"{}"
        classifier = AccessClassifier(transport=fake_transport)

        classifier.is_public(GITHUB_REF.with_token("secret"))

        assert fake_transport.calls == [(GITHUB_API, "", 30)]

    def test_private_on_http_error(self, fake_transport):
        classifier = AccessClassifier(transport=fake_transport)

        assert classifier.is_public(GitRef("https", "github.com", "not", "a-valid")) is False

    def test_private_on_empty_body(self, fake_transport):
        fake_transport.responses[GITHUB_API] = b""
        classifier = AccessClassifier(transport=fake_transport)

        assert classifier.is_public(GITHUB_REF) is False

    def test_private_is_logged_at_debug(self, fake_transport, caplog):
        caplog.set_level(logging.DEBUG, logger="gitref")
        classifier = AccessClassifier(transport=fake_transport)

        assert classifier.is_public(GitRef("https", "github.com", "not", "a-valid")) is False

        records = [r for r in caplog.records if "as private" in r.getMessage()]
        assert [r.levelno for r in records] == [logging.DEBUG]

    @pytest.mark.parametrize(
        "ref,url",
        [
            (GitRef("https", "gitlab.com", "org", "repo"), "https://gitlab.com/api/v4/projects/org%2Frepo"),
            (
                GitRef("https", "bitbucket.org", "org", "repo"),
                "https://api.bitbucket.org/2.0/repositories/org/repo",
            ),
            (GitRef("https", "raw.githubusercontent.com", "org", "repo"), "https://api.github.com/repos/org/repo"),
        ],
    )
    def test_probes_provider_endpoint(self, fake_transport, ref, url):
        fake_transport.responses[url] = b"{}"
        classifier = AccessClassifier(transport=fake_transport)

        assert classifier.is_public(ref) is True
        assert fake_transport.calls[0][0] == url


class TestTimeout:
    """Test probe timeout resolution."""

    @pytest.mark.parametrize("override,expected", [(None, 30), (0, 30), (-5, 30), (7, 7)])
    def test_override(self, fake_transport, override, expected):
        """Non-positive overrides are ignored in favor of the default."""
        fake_transport.responses[GITHUB_API] = b"{}"
        classifier = AccessClassifier(transport=fake_transport)

        classifier.is_public(GITHUB_REF, timeout=override)

        assert fake_transport.calls[0][2] == expected

    def test_configured_default(self, fake_transport):
        fake_transport.responses[GITHUB_API] = b"{}"
        classifier = AccessClassifier(transport=fake_transport, config=GitrefConfig(http_timeout=12))

        classifier.is_public(GITHUB_REF, timeout=0)

        assert fake_transport.calls[0][2] == 12


class TestSetToken:
    """Test token validation."""

    def test_valid_token_is_attached(self, fake_transport):
        fake_transport.responses[GITHUB_API] = b"{}"
        fake_transport.accepted_tokens = {"good"}
        classifier = AccessClassifier(transport=fake_transport)

        ref = classifier.set_token(GITHUB_REF, "good")

        assert ref.token == "good"
        assert ref == GITHUB_REF
        assert GITHUB_REF.token == ""
        assert fake_transport.calls == [(GITHUB_API, "good", 30)]

    def test_invalid_token_raises_and_clears(self, fake_transport):
        fake_transport.responses[GITHUB_API] = b"{}"
        fake_transport.accepted_tokens = {"good"}
        classifier = AccessClassifier(transport=fake_transport)

        with pytest.raises(AuthProbeFailedError, match="failed to set token") as exc_info:
            classifier.set_token(GITHUB_REF.with_token("old"), "bad")

        assert exc_info.value.ref is not None
        assert exc_info.value.ref.token == ""

    def test_error_message_does_not_contain_token(self, fake_transport):
        fake_transport.accepted_tokens = set()
        classifier = AccessClassifier(transport=fake_transport)

        with pytest.raises(AuthProbeFailedError) as exc_info:
            classifier.set_token(GITHUB_REF, "super-secret-value")

        assert "super-secret-value" not in str(exc_info.value)

    def test_underlying_error_is_chained(self, fake_transport):
        classifier = AccessClassifier(transport=fake_transport)

        with pytest.raises(AuthProbeFailedError) as exc_info:
            classifier.set_token(GITHUB_REF, "tkn")

        assert isinstance(exc_info.value.__cause__, AuthProbeFailedError)
        assert isinstance(exc_info.value.__cause__.__cause__, TransportError)


class TestFetchRawFile:
    """Test downloading a single file through the raw file API."""

    def test_fetch_uses_reference_token(self, fake_transport):
        raw = "https://raw.githubusercontent.com/devfile/library/main/devfile.yaml"
        fake_transport.responses[raw] = b"schemaVersion: 2.2.0\n"
        classifier = AccessClassifier(transport=fake_transport)

        content = classifier.fetch_raw_file(GITHUB_REF.with_token("tkn"))

        assert content == b"schemaVersion: 2.2.0\n"
        assert fake_transport.calls == [(raw, "tkn", 30)]

    def test_fetch_requires_file_reference(self, fake_transport):
        classifier = AccessClassifier(transport=fake_transport)

        with pytest.raises(ValueError, match="does not point to a file"):
            classifier.fetch_raw_file(GitRef("https", "github.com", "devfile", "library"))


class TestHttpxTransport:
    """Test the httpx-backed transport with a mock transport."""

    def test_satisfies_protocol(self):
        assert isinstance(HttpxTransport(), Transport)

    def test_sends_bearer_token_and_client_header(self):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen.update(request.headers)
            return httpx.Response(200, content=b"{}")

        transport = HttpxTransport(client_name="my-tool", transport=httpx.MockTransport(handler))
        body = transport.get(GITHUB_API, token="tkn", timeout=5)

        assert body == b"{}"
        assert seen["authorization"] == "Bearer tkn"
        assert seen["client"] == "my-tool"

    def test_no_auth_header_without_token(self):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen.update(request.headers)
            return httpx.Response(200, content=b"{}")

        HttpxTransport(transport=httpx.MockTransport(handler)).get(GITHUB_API, timeout=5)

        assert "authorization" not in seen
        assert "client" not in seen

    def test_non_2xx_raises(self):
        transport = HttpxTransport(transport=httpx.MockTransport(lambda r: httpx.Response(404)))

        with pytest.raises(TransportError, match="404") as exc_info:
            transport.get(GITHUB_API, timeout=5)

        assert exc_info.value.status_code == 404
        assert exc_info.value.url == GITHUB_API

    def test_network_error_raises(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        transport = HttpxTransport(transport=httpx.MockTransport(handler))

        with pytest.raises(TransportError, match="Network error"):
            transport.get(GITHUB_API, timeout=5)

    def test_classifier_over_httpx(self):
        """The classifier treats a 401 from the real transport as private."""
        transport = HttpxTransport(transport=httpx.MockTransport(lambda r: httpx.Response(401)))
        classifier = AccessClassifier(transport=transport)

        assert classifier.is_public(GITHUB_REF) is False
