"""Centralized constants for the gitref package."""

# Supported provider hosts
GITHUB_HOST = "github.com"
RAW_GITHUB_HOST = "raw.githubusercontent.com"
GITLAB_HOST = "gitlab.com"
BITBUCKET_HOST = "bitbucket.org"

PROVIDER_HOSTS = (GITHUB_HOST, RAW_GITHUB_HOST, GITLAB_HOST, BITBUCKET_HOST)

# Path keywords that separate "owner/repo" from "branch/path"
GITHUB_KEYWORDS = ("tree", "blob")
GITLAB_KEYWORDS = ("blob", "tree", "raw")
BITBUCKET_KEYWORDS = ("src", "raw")

# GitLab separates the repository root from the ref with this marker
GITLAB_SEPARATOR = "/-/"

# Username part of an authenticated clone URL
TOKEN_USER = "token"
BITBUCKET_TOKEN_USER = "x-token-auth"

# Environment variables consulted when no token is supplied
GITHUB_TOKEN_ENV = "GITHUB_TOKEN"
GITLAB_TOKEN_ENV = "GITLAB_TOKEN"
BITBUCKET_TOKEN_ENV = "BITBUCKET_TOKEN"

DEFAULT_TOKEN_ENV = {
    GITHUB_HOST: GITHUB_TOKEN_ENV,
    RAW_GITHUB_HOST: GITHUB_TOKEN_ENV,
    GITLAB_HOST: GITLAB_TOKEN_ENV,
    BITBUCKET_HOST: BITBUCKET_TOKEN_ENV,
}

# HTTP probe timeout in seconds
DEFAULT_HTTP_TIMEOUT = 30

# Prefix for scratch clone directories
SCRATCH_PREFIX = "git-resources"

CONFIG_FILENAME = "gitref.toml"
CONFIG_TABLE = "gitref"
TIMEOUT_ENV = "GITREF_HTTP_TIMEOUT"
