"""Parsing of GitHub, GitLab, and Bitbucket URLs into repository references.

A single provider URL can name a repository, a directory in it, or a single
file. Each provider spells this differently:

| Provider  | Example                                                          |
|-----------|------------------------------------------------------------------|
| GitHub    | `https://github.com/devfile/library/blob/main/devfile.yaml`      |
| GitHub raw| `https://raw.githubusercontent.com/devfile/library/main/devfile.yaml` |
| GitLab    | `https://gitlab.com/gitlab-org/gitlab-foss/-/blob/master/README.md` |
| Bitbucket | `https://bitbucket.org/owner/repo/src/main/README.md`            |

All URL handling in gitref goes through `parse_git_url`, which returns an
immutable `GitRef`.
"""

from dataclasses import dataclass, field, replace
from typing import Callable
from urllib.parse import SplitResult, quote, unquote, urlsplit

from gitref.constants import (
    BITBUCKET_HOST,
    BITBUCKET_KEYWORDS,
    BITBUCKET_TOKEN_USER,
    GITHUB_HOST,
    GITHUB_KEYWORDS,
    GITLAB_HOST,
    GITLAB_KEYWORDS,
    GITLAB_SEPARATOR,
    PROVIDER_HOSTS,
    RAW_GITHUB_HOST,
    TOKEN_USER,
)
from gitref.exceptions import (
    EmptyPathError,
    IncompletePathError,
    InvalidUrlError,
    MalformedPathError,
    MalformedRawPathError,
    UnknownPathKeywordError,
    UnsupportedHostError,
)

REDACTED = "****"


@dataclass(frozen=True)
class GitRef:
    """Reference to a repository, or to a file or directory inside one.

    Attributes:
        protocol: URL scheme (e.g., "https")
        host: Provider host (e.g., "github.com")
        owner: Repository owner (user, group, or workspace)
        repo: Repository name
        branch: Branch name, empty for a bare-repository reference
        path: Path inside the repository, empty for a bare-repository reference
        is_file: True when the URL targets a single file
        token: Validated access token. Not part of the reference's identity
               and never shown in repr().
    """

    protocol: str = ""
    host: str = ""
    owner: str = ""
    repo: str = ""
    branch: str = ""
    path: str = ""
    is_file: bool = False
    token: str = field(default="", repr=False, compare=False)

    @property
    def is_git_provider_repo(self) -> bool:
        """True when the host is one of the supported providers."""
        return self.host in PROVIDER_HOSTS

    @property
    def is_bare(self) -> bool:
        """True when the reference points at the repository root."""
        return not self.branch and not self.path

    @property
    def clone_host(self) -> str:
        """Host used as the git remote; raw hosts are never remotes."""
        if self.host == RAW_GITHUB_HOST:
            return GITHUB_HOST
        return self.host

    def with_token(self, token: str) -> "GitRef":
        """Return a copy carrying ``token``.

        Only the access classifier should call this, after the token has been
        validated against the provider.
        """
        return replace(self, token=token)

    def without_token(self) -> "GitRef":
        """Return a copy with the token cleared."""
        return replace(self, token="")

    def repo_url(self, with_credentials: bool = True) -> str:
        """Build the git remote URL for this reference.

        Examples:
            >>> GitRef("https", "github.com", "owner", "repo").repo_url()
            'https://github.com/owner/repo.git'
            >>> GitRef("https", "github.com", "owner", "repo", token="t").repo_url()
            'https://token:t@github.com/owner/repo.git'
            >>> GitRef("https", "bitbucket.org", "owner", "repo", token="t").repo_url()
            'https://x-token-auth:t@bitbucket.org/owner/repo.git'
        """
        return self._format_repo_url(self.token if with_credentials else "")

    @property
    def redacted_url(self) -> str:
        """Remote URL safe to log: the token, if any, is masked."""
        return self._format_repo_url(REDACTED if self.token else "")

    def _format_repo_url(self, secret: str) -> str:
        host = self.clone_host
        if not secret:
            return f"{self.protocol}://{host}/{self.owner}/{self.repo}.git"
        user = BITBUCKET_TOKEN_USER if self.host == BITBUCKET_HOST else TOKEN_USER
        return f"{self.protocol}://{user}:{secret}@{host}/{self.owner}/{self.repo}.git"

    def metadata_api(self) -> str:
        """Endpoint probed to decide whether the repository is readable."""
        if self.host in (GITHUB_HOST, RAW_GITHUB_HOST):
            return f"https://api.github.com/repos/{self.owner}/{self.repo}"
        if self.host == GITLAB_HOST:
            return f"https://gitlab.com/api/v4/projects/{_gitlab_project_id(self.owner, self.repo)}"
        if self.host == BITBUCKET_HOST:
            return f"https://api.bitbucket.org/2.0/repositories/{self.owner}/{self.repo}"
        return f"{self.protocol}://{self.host}/{self.owner}/{self.repo}.git"

    def raw_file_api(self) -> str:
        """Endpoint serving the raw contents of the referenced file.

        Returns an empty string for hosts that are not supported providers.

        Examples:
            >>> GitRef("https", "github.com", "devfile", "library", "main", "tests/README.md").raw_file_api()
            'https://raw.githubusercontent.com/devfile/library/main/tests/README.md'
            >>> GitRef("https", "gitlab.com", "gitlab-org", "gitlab", "master", "README.md").raw_file_api()
            'https://gitlab.com/api/v4/projects/gitlab-org%2Fgitlab/repository/files/README.md/raw'
        """
        if self.host in (GITHUB_HOST, RAW_GITHUB_HOST):
            return f"https://raw.githubusercontent.com/{self.owner}/{self.repo}/{self.branch}/{self.path}"
        if self.host == GITLAB_HOST:
            project = _gitlab_project_id(self.owner, self.repo)
            return f"https://gitlab.com/api/v4/projects/{project}/repository/files/{quote(self.path, safe='')}/raw"
        if self.host == BITBUCKET_HOST:
            return (
                f"https://api.bitbucket.org/2.0/repositories/"
                f"{self.owner}/{self.repo}/src/{self.branch}/{self.path}"
            )
        return ""


def _gitlab_project_id(owner: str, repo: str) -> str:
    """URL-encoded project path, as the GitLab API expects it."""
    return quote(f"{owner}/{repo}", safe="")


def _has_extension(path: str) -> bool:
    """True when the last path segment has a non-empty suffix after a dot.

    A directory can contain a dot and a file can lack one, so this is only a
    heuristic. It is what GitLab and Bitbucket URLs give us to go on.
    """
    last = path.rsplit("/", 1)[-1]
    dot = last.rfind(".")
    return dot != -1 and dot < len(last) - 1


def _require_owner_repo(owner: str, repo: str, path: str) -> None:
    if not owner or not repo:
        raise MalformedPathError(f"url path should contain <user>/<repo>, received: {path}")


def _parse_github_raw(url: SplitResult, host: str, path: str) -> GitRef:
    # raw GitHub urls are always files and carry no "blob" or "tree"
    segments = path.split("/", 3)
    if len(segments) != 4 or not all(segments[2:]):
        raise MalformedRawPathError(
            f"raw url path should contain <owner>/<repo>/<branch>/<path/to/file>, received: {path}"
        )
    owner, repo, branch, file_path = segments
    _require_owner_repo(owner, repo, path)
    return GitRef(url.scheme, host, owner, repo, branch, file_path, is_file=True)


def _parse_github(url: SplitResult, host: str, path: str) -> GitRef:
    segments = path.split("/", 4)
    if len(segments) < 2:
        raise MalformedPathError(f"url path should contain <user>/<repo>, received: {path}")
    owner, repo = segments[0], segments[1]
    _require_owner_repo(owner, repo, path)

    if len(segments) == 2:
        return GitRef(url.scheme, host, owner, repo)

    keyword = segments[2]
    if keyword not in GITHUB_KEYWORDS:
        raise UnknownPathKeywordError(
            f"url path to directory or file should contain 'tree' or 'blob', received: {path}"
        )
    if len(segments) != 5 or not all(segments[3:]):
        raise MalformedPathError(
            "url path should contain <owner>/<repo>/<tree or blob>/<branch>/"
            f"<path/to/file/or/directory>, received: {path}"
        )
    return GitRef(
        url.scheme, host, owner, repo, segments[3], segments[4], is_file=keyword == "blob"
    )


def _parse_gitlab(url: SplitResult, host: str, path: str) -> GitRef:
    parts = path.split(GITLAB_SEPARATOR)

    org = parts[0].split("/", 1)
    if len(org) < 2:
        raise MalformedPathError(f"url path should contain <user>/<repo>, received: {path}")
    owner, repo = org
    _require_owner_repo(owner, repo, path)

    if len(parts) == 1:
        return GitRef(url.scheme, host, owner, repo)

    target = parts[1].split("/", 2) if len(parts) == 2 else []
    if len(target) != 3 or not all(target[1:]):
        raise IncompletePathError(
            "url path to directory or file should contain <blob or tree or raw>/<branch>/"
            f"<path/to/file/or/directory>, received: {path}"
        )
    keyword, branch, target_path = target
    if keyword not in GITLAB_KEYWORDS:
        raise UnknownPathKeywordError(
            f"url path should contain 'blob' or 'tree' or 'raw', received: {path}"
        )
    return GitRef(
        url.scheme, host, owner, repo, branch, target_path, is_file=_has_extension(target_path)
    )


def _parse_bitbucket(url: SplitResult, host: str, path: str) -> GitRef:
    segments = path.split("/", 4)
    if len(segments) < 2:
        raise MalformedPathError(f"url path should contain <user>/<repo>, received: {path}")
    owner, repo = segments[0], segments[1]
    _require_owner_repo(owner, repo, path)

    if len(segments) == 2:
        return GitRef(url.scheme, host, owner, repo)
    if len(segments) != 5 or not all(segments[3:]):
        raise IncompletePathError(
            f"url path should contain path to directory or file, received: {path}"
        )

    keyword, branch, target_path = segments[2:]
    if keyword not in BITBUCKET_KEYWORDS:
        raise UnknownPathKeywordError(f"url path should contain 'raw' or 'src', received: {path}")
    return GitRef(
        url.scheme, host, owner, repo, branch, target_path, is_file=_has_extension(target_path)
    )


_GRAMMARS: dict[str, Callable[[SplitResult, str, str], GitRef]] = {
    GITHUB_HOST: _parse_github,
    RAW_GITHUB_HOST: _parse_github_raw,
    GITLAB_HOST: _parse_gitlab,
    BITBUCKET_HOST: _parse_bitbucket,
}


def validate_url(source_url: str) -> SplitResult:
    """Split ``source_url``, requiring both a scheme and a host.

    Raises:
        InvalidUrlError: If the string is not an absolute URL
    """
    try:
        url = urlsplit(source_url)
    except ValueError as e:
        raise InvalidUrlError(f"URL is invalid: {e}") from e
    if not url.scheme or not url.netloc:
        raise InvalidUrlError("URL is invalid")
    return url


def parse_git_url(raw_url: str) -> GitRef:
    """Parse a GitHub, GitLab, or Bitbucket URL into a GitRef.

    Args:
        raw_url: The URL to parse

    Returns:
        GitRef with all components extracted

    Raises:
        InvalidUrlError: If the string is not an absolute URL
        EmptyPathError: If the URL has no path
        UnsupportedHostError: If the host is not a supported provider
        MalformedPathError: If the path does not match the provider's layout

    Examples:
        >>> ref = parse_git_url("https://github.com/devfile/library")
        >>> (ref.owner, ref.repo, ref.branch, ref.path, ref.is_file)
        ('devfile', 'library', '', '', False)
        >>> ref = parse_git_url("https://gitlab.com/gitlab-org/gitlab-foss/-/blob/master/README.md")
        >>> (ref.branch, ref.path, ref.is_file)
        ('master', 'README.md', True)
    """
    url = validate_url(raw_url)
    if not url.path:
        raise EmptyPathError("url path should not be empty")

    # userinfo is not part of the host; the port is
    host = url.netloc.rpartition("@")[2].lower()
    grammar = _GRAMMARS.get(host)
    if grammar is None:
        raise UnsupportedHostError(
            f"url host should be a valid GitHub, GitLab, or Bitbucket host; received: {host}"
        )
    # decoded, as the names appear in the checkout
    return grammar(url, host, unquote(url.path)[1:])


def new_git_ref(raw_url: str) -> GitRef:
    """Create a GitRef from a URL string. Alias of `parse_git_url`."""
    return parse_git_url(raw_url)
