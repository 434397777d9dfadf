"""
Publisher configuration.

Settings come from ``JP_*`` environment variables; command-line flags
override them.
"""

import os
from typing import Any

from pydantic import BaseModel, Field

from javadoc_publisher.core.exceptions import ConfigurationError, UsageError

SCM_GIT_PREFIX = "scm:git:"

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off", ""}


class PublisherConfig(BaseModel):
    """Configuration for a publish run."""

    branch: str = "gh-pages"
    remote: str = "origin"
    search_url: str = "https://search.maven.org"
    repository_url: str = "https://repo1.maven.org/maven2"
    search_rows: int = Field(default=20, ge=1)
    http_timeout_seconds: float = Field(default=60.0, gt=0)
    read_timeout_seconds: float = Field(default=30.0, gt=0)
    deadline_seconds: float = Field(default=300.0, gt=0)
    terminate_timeout_seconds: float = Field(default=30.0, gt=0)
    dry_run: bool = False
    force: bool = False


# env var -> (field, converter)
_ENV_FIELDS: dict[str, tuple[str, type]] = {
    "JP_BRANCH": ("branch", str),
    "JP_REMOTE": ("remote", str),
    "JP_SEARCH_URL": ("search_url", str),
    "JP_REPOSITORY_URL": ("repository_url", str),
    "JP_SEARCH_ROWS": ("search_rows", int),
    "JP_HTTP_TIMEOUT": ("http_timeout_seconds", float),
    "JP_READ_TIMEOUT": ("read_timeout_seconds", float),
    "JP_DEADLINE": ("deadline_seconds", float),
    "JP_TERMINATE_TIMEOUT": ("terminate_timeout_seconds", float),
    "JP_DRY_RUN": ("dry_run", bool),
    "JP_FORCE": ("force", bool),
}


def _parse_bool(env_var: str, raw: str) -> bool:
    value = raw.strip().lower()
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    raise ConfigurationError(
        f"Invalid boolean value for {env_var}: {raw!r}",
        env_var=env_var,
    )


def load_config(environ: dict[str, str] | None = None, **overrides: Any) -> PublisherConfig:
    """
    Load configuration from the environment.

    Args:
        environ: Mapping to read instead of ``os.environ``
        **overrides: Field values that take precedence over the environment;
            ``None`` values are ignored

    Returns:
        Validated PublisherConfig

    Raises:
        ConfigurationError: If a variable cannot be converted or validated
    """
    environ = os.environ if environ is None else environ
    values: dict[str, Any] = {}

    for env_var, (field_name, converter) in _ENV_FIELDS.items():
        raw = environ.get(env_var)
        if raw is None:
            continue
        if converter is bool:
            values[field_name] = _parse_bool(env_var, raw)
            continue
        try:
            values[field_name] = converter(raw)
        except ValueError:
            raise ConfigurationError(
                f"Invalid value for {env_var}: {raw!r}",
                env_var=env_var,
                config_key=field_name,
            ) from None

    values.update({k: v for k, v in overrides.items() if v is not None})

    try:
        return PublisherConfig(**values)
    except ValueError as e:
        raise ConfigurationError(
            f"Invalid publisher configuration: {e}",
        ) from e


def resolve_repo_url(value: str) -> str:
    """
    Return a git remote URL from a plain URL or a Maven SCM connection.

    ``scm:git:git@github.com:org/repo.git`` becomes
    ``git@github.com:org/repo.git``. Other SCM providers are rejected.
    """
    if value.startswith(SCM_GIT_PREFIX):
        return value[len(SCM_GIT_PREFIX):]
    if value.startswith("scm:"):
        raise UsageError(
            f"Unexpected developer connection: {value}",
            argument="repo_url",
        )
    return value
