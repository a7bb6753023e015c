"""Download the file a provider URL points to, together with its siblings.

`ResourceExtractor` runs the whole pipeline: parse the URL, decide whether a
token is needed, clone into a scratch directory, and copy the directory that
contains the target file to the caller's destination.
"""

from pathlib import Path

from gitref.access import AccessClassifier
from gitref.clone import GitCloner
from gitref.config import GitrefConfig
from gitref.exceptions import ResourceNotFoundError, UnsupportedTargetError
from gitref.fsutils import copy_all_dir_files, scratch_directory
from gitref.log import get_logger
from gitref.reference import GitRef, parse_git_url

logger = get_logger(__name__)


class ResourceExtractor:
    """Fetches the directory holding a referenced file into a local directory."""

    def __init__(
        self,
        classifier: AccessClassifier | None = None,
        cloner: GitCloner | None = None,
        config: GitrefConfig | None = None,
    ) -> None:
        """Initialize the extractor.

        Args:
            classifier: Access classifier. If None, one is built from ``config``.
            cloner: Repository cloner. If None, clones with the system git.
            config: Settings. If None, uses the classifier's, or the defaults.
        """
        if config is None:
            config = classifier.config if classifier is not None else GitrefConfig()
        self._config = config
        self._classifier = classifier or AccessClassifier(config=config)
        self._cloner = cloner or GitCloner()

    def authorize(self, ref: GitRef, token: str = "", timeout: int | None = None) -> GitRef:
        """Return ``ref`` ready to clone: unchanged if public, else with a validated token.

        Without an explicit ``token`` the provider's environment variable is tried.

        Raises:
            AuthProbeFailedError: If the repository is private and the token is rejected
        """
        if self._classifier.is_public(ref, timeout):
            return ref
        candidate = token or self._config.token_from_env(ref.host)
        return self._classifier.set_token(ref, candidate, timeout)

    def download_to_destination(
        self,
        url: str,
        dest_dir: Path,
        timeout: int | None = None,
        token: str = "",
    ) -> None:
        """Download the directory containing the file ``url`` points to into ``dest_dir``.

        Args:
            url: GitHub, GitLab, or Bitbucket URL of a file
            dest_dir: Destination directory
            timeout: HTTP probe timeout in seconds (None or <= 0 uses the default)
            token: Token for private repositories

        Raises:
            ParseError: If the URL cannot be parsed
            UnsupportedTargetError: If the URL does not point to a file on a supported provider
            AuthProbeFailedError: If the repository is private and the token is rejected
            CloneFailedError: If git clone fails
            ResourceNotFoundError: If the file's directory is missing from the clone
        """
        ref = parse_git_url(url)
        if not ref.is_git_provider_repo or not ref.is_file:
            raise UnsupportedTargetError(
                f"url should point to a file in a GitHub, GitLab, or Bitbucket repo, received: {url}"
            )

        with scratch_directory(self._config.scratch_root) as scratch:
            ref = self.authorize(ref, token, timeout)
            self._cloner.clone(ref, scratch)

            source_dir = (scratch / ref.path).parent.resolve()
            if not source_dir.is_relative_to(scratch.resolve()):
                raise UnsupportedTargetError(f"path escapes the repository: {ref.path}")
            if not source_dir.is_dir():
                raise ResourceNotFoundError(
                    f"'{ref.path}' not found in {ref.owner}/{ref.repo}.\n"
                    f"Expected directory: {source_dir.relative_to(scratch.resolve())}"
                )

            logger.debug("Copying %s to %s", source_dir, dest_dir)
            copy_all_dir_files(source_dir, Path(dest_dir))


def download_resources_to_dest(
    url: str,
    dest_dir: Path,
    timeout: int | None = None,
    token: str = "",
) -> None:
    """Download the directory containing the file ``url`` points to, with default collaborators."""
    ResourceExtractor().download_to_destination(url, dest_dir, timeout, token)
