# Entrius 2025
import logging
import math
import time
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

import requests

from nixpr.classes import PullRequest
from nixpr.constants import (
    BASE_GITHUB_API_URL,
    DEFAULT_SOURCE_REPOSITORY,
    MAX_PAGE_ATTEMPTS,
    PAGE_SIZE,
    REQUEST_TIMEOUT_SECONDS,
    USER_AGENT,
)
from nixpr.errors import FetchError

logger = logging.getLogger(__name__)

# GitHub rate limits
RATE_LIMIT_BUFFER_SECONDS = 5
RATE_LIMIT_LOW_WATERMARK = 10
RATE_LIMIT_MAX_WAIT_SECONDS = 15 * 60
SECONDARY_RATE_LIMIT_WAIT_SECONDS = 60
RATE_LIMIT_LOG_INTERVAL_SECONDS = 60


@dataclass(frozen=True)
class RateLimitInfo:
    """Primary rate limit quota from the X-RateLimit-* response headers."""

    limit: int
    remaining: int
    reset_timestamp: int  # unix time

    @classmethod
    def from_headers(cls, headers: Any) -> Optional['RateLimitInfo']:
        try:
            limit = int(headers.get('X-RateLimit-Limit', 0))
            remaining = int(headers.get('X-RateLimit-Remaining', 0))
            reset_timestamp = int(headers.get('X-RateLimit-Reset', 0))
        except (TypeError, ValueError) as e:
            logger.debug(f"Ignoring malformed rate limit headers: {e}")
            return None

        if not limit and not reset_timestamp:
            return None
        return cls(limit=limit, remaining=remaining, reset_timestamp=reset_timestamp)

    @property
    def is_exceeded(self) -> bool:
        return self.remaining == 0

    @property
    def is_low(self) -> bool:
        return self.remaining <= RATE_LIMIT_LOW_WATERMARK

    def seconds_until_reset(self) -> int:
        return max(0, self.reset_timestamp - int(time.time()))


def _capped_wait(seconds: int) -> int:
    return min(seconds + RATE_LIMIT_BUFFER_SECONDS, RATE_LIMIT_MAX_WAIT_SECONDS)


def parse_rate_limit_headers(response: requests.Response) -> Optional[RateLimitInfo]:
    return RateLimitInfo.from_headers(response.headers)


def is_rate_limited(response: requests.Response) -> Tuple[bool, Optional[int]]:
    """
    Decide whether a 403/429 response is a rate limit, and how long to wait.

    Primary limits report X-RateLimit-Remaining: 0 and a reset timestamp.
    Secondary limits mention "rate limit" in the body and may send Retry-After.
    A plain 403 (bad token, no access) is not a rate limit.

    Returns:
        Tuple of (is_rate_limited, seconds_to_wait), waits capped at 15 minutes
    """
    if response.status_code not in (403, 429):
        return (False, None)

    info = parse_rate_limit_headers(response)
    if info and info.is_exceeded:
        return (True, _capped_wait(info.seconds_until_reset()))

    if 'rate limit' not in (response.text or '').lower():
        return (False, None)

    retry_after = str(response.headers.get('Retry-After', ''))
    if retry_after.isdigit():
        return (True, _capped_wait(int(retry_after)))
    return (True, SECONDARY_RATE_LIMIT_WAIT_SECONDS)


def log_rate_limit_quota(response: requests.Response) -> None:
    """Warn when the quota left after a successful request is running low."""
    info = parse_rate_limit_headers(response)
    if info and info.is_low:
        logger.warning(
            f"GitHub API quota low: {info.remaining}/{info.limit} requests left, "
            f"resets in {info.seconds_until_reset()}s"
        )


def wait_for_rate_limit_reset(wait_seconds: int, context: str = "") -> None:
    """Sleep through a rate limit, logging progress once a minute."""
    suffix = f" ({context})" if context else ""
    logger.warning(f"GitHub API rate limit hit{suffix}, waiting {wait_seconds}s")

    remaining = wait_seconds
    while remaining > 0:
        step = min(remaining, RATE_LIMIT_LOG_INTERVAL_SECONDS)
        time.sleep(step)
        remaining -= step
        if remaining:
            logger.info(f"Rate limit wait: {remaining}s left{suffix}")

    logger.info("Rate limit wait over, resuming requests")


def make_headers(token: Optional[str] = None) -> Dict[str, str]:
    """Build standard GitHub HTTP headers, with a bearer credential when a token is set.

    Args:
        token (Optional[str]): GitHub pat
    Returns:
        Dict[str, str]: Mapping of HTTP header names to values.
    """
    headers = {
        "Accept": "application/vnd.github.v3+json",
        "User-Agent": USER_AGENT,
    }
    if token:
        headers["Authorization"] = f"Bearer {token}"
    return headers


def _parse_pulls_page(page: int, response: requests.Response) -> List[PullRequest]:
    try:
        items: Any = response.json()
    except ValueError as e:
        raise FetchError(page, f"Failed to parse GitHub response: {e}") from e

    if not isinstance(items, list):
        raise FetchError(page, "Failed to parse GitHub response: expected a list of pull requests")

    try:
        return [PullRequest.from_github_response(item) for item in items]
    except (KeyError, TypeError, ValueError) as e:
        raise FetchError(page, f"Unexpected pull request payload: {e}") from e


def get_open_pull_requests_page(
    page: int,
    repository: str = DEFAULT_SOURCE_REPOSITORY,
    token: Optional[str] = None,
    per_page: int = PAGE_SIZE,
) -> List[PullRequest]:
    '''
    Get one page of open PRs for a repository, newest first.
    Retries rate limits and transient server errors.

    Args:
        page (int): 1-based page index
        repository (str): Repository in format 'owner/repo'
        token (Optional[str]): Github pat, raises the API rate limit when set
        per_page (int): Page size
    Returns:
        List[PullRequest]: PRs on the page
    Raises:
        FetchError: the page could not be retrieved
    '''
    url = f'{BASE_GITHUB_API_URL}/repos/{repository}/pulls'
    params = {
        'state': 'open',
        'sort': 'created',
        'direction': 'desc',
        'per_page': per_page,
        'page': page,
    }
    headers = make_headers(token)
    last_error = "no attempts made"

    for attempt in range(MAX_PAGE_ATTEMPTS):
        is_last_attempt = attempt == MAX_PAGE_ATTEMPTS - 1
        try:
            response = requests.get(url, headers=headers, params=params, timeout=REQUEST_TIMEOUT_SECONDS)
        except requests.exceptions.RequestException as e:
            last_error = f"Failed to fetch PRs from GitHub: {e}"
            if not is_last_attempt:
                backoff_delay = 5 * (2**attempt)
                logger.warning(
                    f"Page {page} connection error (attempt {attempt + 1}/{MAX_PAGE_ATTEMPTS}): {e}, "
                    f"retrying in {backoff_delay}s..."
                )
                time.sleep(backoff_delay)
            continue

        rate_limited, wait_seconds = is_rate_limited(response)
        if rate_limited and wait_seconds:
            last_error = f"GitHub API rate limit exceeded ({response.status_code})"
            if not is_last_attempt:
                wait_for_rate_limit_reset(wait_seconds, context=f"page {page}")
                continue
            break

        if response.status_code == 200:
            log_rate_limit_quota(response)
            return _parse_pulls_page(page, response)

        last_error = f"GitHub API returned {response.status_code}: {response.text}"
        if response.status_code < 500:
            break

        if not is_last_attempt:
            backoff_delay = 5 * (2**attempt)
            logger.warning(
                f"Page {page} request failed with status {response.status_code} "
                f"(attempt {attempt + 1}/{MAX_PAGE_ATTEMPTS}), retrying in {backoff_delay}s..."
            )
            time.sleep(backoff_delay)

    logger.error(f"Giving up on page {page}: {last_error}")
    raise FetchError(page, last_error)


def fetch_open_pull_requests(
    total_limit: int,
    repository: str = DEFAULT_SOURCE_REPOSITORY,
    token: Optional[str] = None,
    per_page: int = PAGE_SIZE,
) -> List[PullRequest]:
    """
    Fetch up to `total_limit` open PRs, newest first, one page at a time.

    Stops after a short page (source exhausted) or once `total_limit` PRs have
    been collected. Any failing page aborts the whole fetch.

    Args:
        total_limit (int): Maximum number of PRs to return
        repository (str): Repository in format 'owner/repo'
        token (Optional[str]): Github pat
        per_page (int): Page size

    Returns:
        List[PullRequest]: At most `total_limit` PRs in source order

    Raises:
        FetchError: a page request failed
    """
    if total_limit <= 0:
        return []

    pages = math.ceil(total_limit / per_page)
    all_prs: List[PullRequest] = []

    for page in range(1, pages + 1):
        logger.info(f"Fetching PRs (page {page}/{pages})...")
        prs = get_open_pull_requests_page(page, repository=repository, token=token, per_page=per_page)
        exhausted = len(prs) < per_page
        all_prs.extend(prs)
        if exhausted or len(all_prs) >= total_limit:
            break

    del all_prs[total_limit:]
    logger.info(f"Fetched {len(all_prs)} open PRs total")
    return all_prs
