"""Public/private classification of repositories and token validation.

Both decisions come from a single GET against the provider's repository
metadata endpoint (`GitRef.metadata_api`): a 2xx response with a non-empty
body means the caller can read the repository with the credentials sent.
"""

from gitref.config import GitrefConfig
from gitref.exceptions import AuthProbeFailedError, TransportError
from gitref.log import get_logger
from gitref.reference import GitRef
from gitref.transport import HttpxTransport, Transport

logger = get_logger(__name__)


class AccessClassifier:
    """Probes provider APIs to decide whether credentials are needed."""

    def __init__(
        self,
        transport: Transport | None = None,
        config: GitrefConfig | None = None,
    ) -> None:
        self._config = config or GitrefConfig()
        self._transport = transport or HttpxTransport(client_name=self._config.client_name)

    @property
    def config(self) -> GitrefConfig:
        return self._config

    def probe(self, ref: GitRef, token: str = "", timeout: int | None = None) -> None:
        """Request the repository metadata once.

        Raises:
            AuthProbeFailedError: On network failure, non-2xx status, or empty body
        """
        url = ref.metadata_api()
        try:
            body = self._transport.get(
                url, token=token, timeout=self._config.resolve_timeout(timeout)
            )
        except TransportError as e:
            raise AuthProbeFailedError(str(e)) from e
        if not body:
            raise AuthProbeFailedError(f"empty response from {url}")

    def is_public(self, ref: GitRef, timeout: int | None = None) -> bool:
        """True if the repository can be read without a token.

        Any probe failure counts as private.
        """
        try:
            self.probe(ref, "", timeout)
        except AuthProbeFailedError as e:
            logger.debug("Treating %s/%s as private: %s", ref.owner, ref.repo, e)
            return False
        return True

    def set_token(self, ref: GitRef, token: str, timeout: int | None = None) -> GitRef:
        """Validate ``token`` against the repository and return a reference carrying it.

        Raises:
            AuthProbeFailedError: If the probe fails. The error's ``ref`` is the
                reference with its token cleared.
        """
        try:
            self.probe(ref, token, timeout)
        except AuthProbeFailedError as e:
            raise AuthProbeFailedError(
                f"failed to set token. error: {e}", ref=ref.without_token()
            ) from e
        return ref.with_token(token)

    def fetch_raw_file(self, ref: GitRef, timeout: int | None = None) -> bytes:
        """Download the contents of the file ``ref`` points to.

        Uses the reference's own (already validated) token, if any.

        Raises:
            TransportError: If the request fails
        """
        url = ref.raw_file_api()
        if not url or not ref.is_file:
            raise ValueError(f"{ref.owner}/{ref.repo}: reference does not point to a file")
        return self._transport.get(
            url, token=ref.token, timeout=self._config.resolve_timeout(timeout)
        )
