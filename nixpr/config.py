# The MIT License (MIT)
# Copyright © 2025 Entrius

"""
nixpr configuration.

The config file is JSON, located at ~/.nixpr/config.json unless
NIXPR_CONFIG or --config points elsewhere:

    {
      "github":  {"token": "...", "repository": "NixOS/nixpkgs"},
      "filters": {"excluded_users": ["r-ryantm"], "excluded_prefixes": ["nixos/", "treewide"]},
      "review":  {"repo": "liberodark/nixpkgs-review-gha", "workflow": "review.yml"}
    }

A missing file means defaults. A missing section means that section's
defaults. A malformed file is a ConfigError, never a silent fallback.
"""

import json
import logging
import os
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from nixpr.constants import (
    CONFIG_FILE,
    DEFAULT_EXCLUDED_PREFIXES,
    DEFAULT_EXCLUDED_USERS,
    DEFAULT_REVIEW_REPO,
    DEFAULT_REVIEW_WORKFLOW,
    DEFAULT_SOURCE_REPOSITORY,
)
from nixpr.errors import ConfigError
from nixpr.triage.exclusion import FilterRules

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = 'NIXPR_CONFIG'
TOKEN_ENV_VAR = 'GITHUB_TOKEN'


@dataclass
class GithubConfig:
    token: Optional[str] = None  # optional, raises the API rate limit
    repository: str = DEFAULT_SOURCE_REPOSITORY


@dataclass
class FilterConfig:
    excluded_users: List[str] = field(default_factory=lambda: list(DEFAULT_EXCLUDED_USERS))
    excluded_prefixes: List[str] = field(default_factory=lambda: list(DEFAULT_EXCLUDED_PREFIXES))


@dataclass
class ReviewConfig:
    repo: str = DEFAULT_REVIEW_REPO  # repo hosting the review workflow (owner/name)
    workflow: str = DEFAULT_REVIEW_WORKFLOW


@dataclass
class Config:
    github: GithubConfig = field(default_factory=GithubConfig)
    filters: FilterConfig = field(default_factory=FilterConfig)
    review: ReviewConfig = field(default_factory=ReviewConfig)

    def github_token(self) -> Optional[str]:
        """Token from the config file, falling back to $GITHUB_TOKEN."""
        return self.github.token or os.environ.get(TOKEN_ENV_VAR) or None

    def filter_rules(self) -> FilterRules:
        return FilterRules.from_lists(self.filters.excluded_users, self.filters.excluded_prefixes)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def get_config_path(path: Optional[Union[str, Path]] = None) -> Path:
    """Resolve the config path: explicit argument, then $NIXPR_CONFIG, then the default."""
    if path:
        return Path(path).expanduser()
    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        return Path(env_path).expanduser()
    return CONFIG_FILE


def _section(data: Dict[str, Any], name: str, path: Path) -> Optional[Dict[str, Any]]:
    section = data.get(name)
    if section is None:
        return None
    if not isinstance(section, dict):
        raise ConfigError(f"Failed to parse config: {path}: '{name}' must be an object")
    return section


def _string(section: Dict[str, Any], key: str, default: Optional[str], path: Path, section_name: str) -> Optional[str]:
    value = section.get(key, default)
    if value is not None and not isinstance(value, str):
        raise ConfigError(f"Failed to parse config: {path}: '{section_name}.{key}' must be a string")
    return value


def _string_list(section: Dict[str, Any], key: str, path: Path) -> List[str]:
    value = section.get(key, [])
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise ConfigError(f"Failed to parse config: {path}: 'filters.{key}' must be a list of strings")
    return value


def parse_config(data: Any, path: Path) -> Config:
    """Build a Config from decoded JSON, validating types."""
    if not isinstance(data, dict):
        raise ConfigError(f"Failed to parse config: {path}: top level must be an object")

    config = Config()

    github = _section(data, 'github', path)
    if github is not None:
        config.github = GithubConfig(
            token=_string(github, 'token', None, path, 'github'),
            repository=_string(github, 'repository', DEFAULT_SOURCE_REPOSITORY, path, 'github'),
        )

    # Inside a present filters section, an omitted list means "exclude nothing"
    filters = _section(data, 'filters', path)
    if filters is not None:
        config.filters = FilterConfig(
            excluded_users=_string_list(filters, 'excluded_users', path),
            excluded_prefixes=_string_list(filters, 'excluded_prefixes', path),
        )

    review = _section(data, 'review', path)
    if review is not None:
        config.review = ReviewConfig(
            repo=_string(review, 'repo', DEFAULT_REVIEW_REPO, path, 'review'),
            workflow=_string(review, 'workflow', DEFAULT_REVIEW_WORKFLOW, path, 'review'),
        )

    return config


def load_config(path: Optional[Union[str, Path]] = None) -> Config:
    """Load configuration from file or use defaults.

    Raises:
        ConfigError: the file exists but cannot be read or parsed.
    """
    config_path = get_config_path(path)

    if not config_path.exists():
        logger.info(f"No config at {config_path}, using defaults")
        return Config()

    try:
        with open(config_path, 'r', encoding='utf-8') as f:
            data = json.load(f)
    except OSError as e:
        raise ConfigError(f"Failed to read config: {config_path}: {e}") from e
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise ConfigError(f"Failed to parse config: {config_path}: {e}") from e

    logger.info(f"Loaded configuration from {config_path}")
    return parse_config(data, config_path)


def write_default_config(path: Optional[Union[str, Path]] = None) -> Path:
    """Write a config file populated with the defaults and return its path."""
    config_path = get_config_path(path)
    config_path.parent.mkdir(parents=True, exist_ok=True)
    with open(config_path, 'w') as f:
        json.dump(Config().to_dict(), f, indent=2)
    return config_path
