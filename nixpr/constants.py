# The MIT License (MIT)
# Copyright © 2025 Entrius

from pathlib import Path

# =============================================================================
# GitHub API
# =============================================================================
BASE_GITHUB_API_URL = "https://api.github.com"
BASE_GITHUB_URL = "https://github.com"
DEFAULT_SOURCE_REPOSITORY = "NixOS/nixpkgs"
USER_AGENT = "nixpr"
PAGE_SIZE = 100
REQUEST_TIMEOUT_SECONDS = 30
MAX_PAGE_ATTEMPTS = 3

# =============================================================================
# Filters
# =============================================================================
DEFAULT_EXCLUDED_USERS = ("r-ryantm",)  # nixpkgs-update bot
DEFAULT_EXCLUDED_PREFIXES = ("nixos/", "treewide")

# =============================================================================
# Review workflow
# =============================================================================
DEFAULT_REVIEW_REPO = "liberodark/nixpkgs-review-gha"
DEFAULT_REVIEW_WORKFLOW = "review.yml"
DEFAULT_RUN_LIMIT = 100
DEFAULT_STATUS_LIMIT = 10

# =============================================================================
# Local files
# =============================================================================
NIXPR_DIR = Path.home() / '.nixpr'
CONFIG_FILE = NIXPR_DIR / 'config.json'
STATE_FILE = NIXPR_DIR / 'processed.json'
LOG_FILE = NIXPR_DIR / 'nixpr.log'
