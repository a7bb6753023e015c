"""Cloning a referenced repository with provider-specific credentials."""

from pathlib import Path
from typing import Callable

from gitref import fsutils
from gitref.exceptions import CloneFailedError, CommandExecutionError, DestinationMissingError
from gitref.log import get_logger
from gitref.reference import REDACTED, GitRef
from gitref.runner import CommandType, ProcessRunner, SubprocessRunner

logger = get_logger(__name__)


def _mask(text: str, token: str) -> str:
    return text.replace(token, REDACTED) if token else text


class GitCloner:
    """Clones the repository behind a GitRef into an existing directory."""

    def __init__(
        self,
        runner: ProcessRunner | None = None,
        path_exists: Callable[[Path], bool] = fsutils.path_exists,
    ) -> None:
        self._runner = runner or SubprocessRunner()
        self._path_exists = path_exists

    def clone(self, ref: GitRef, dest_dir: Path) -> None:
        """Clone the whole repository into ``dest_dir``.

        Args:
            ref: Reference to clone; its token, if set, is used for authentication
            dest_dir: Existing directory to clone into

        Raises:
            DestinationMissingError: If ``dest_dir`` does not exist
            CloneFailedError: If git fails
        """
        if not self._path_exists(dest_dir):
            raise DestinationMissingError(
                f"failed to clone repo, destination directory: '{dest_dir}' does not exists"
            )

        logger.debug("Cloning %s into %s", ref.redacted_url, dest_dir)
        cause: CommandExecutionError | None = None
        try:
            output = self._runner.execute(dest_dir, CommandType.GIT, "clone", ref.repo_url(), ".")
        except CommandExecutionError as e:
            # the unmasked error must not become the context of the raised one
            cause = CommandExecutionError(
                _mask(str(e), ref.token),
                returncode=e.returncode,
                output=_mask(e.output.decode(errors="replace"), ref.token).encode(),
            )

        if cause is not None:
            if ref.token:
                raise CloneFailedError(
                    "failed to clone repo with token, ensure that the url and token is correct. "
                    f"error: {cause}",
                    token_used=True,
                ) from cause
            raise CloneFailedError(
                "failed to clone repo without a token, ensure that a token is set if the repo "
                f"is private. error: {cause}",
                token_used=False,
            ) from cause

        logger.debug("git clone output: %s", _mask(output.decode(errors="replace"), ref.token))
