"""
Client for the limit-info endpoints, used by client-facing callers.

Limit info only drives a UI warning, so every failure (timeout, connection
error, non-2xx status, malformed body) resolves to the fail-open default
through FailOpenPolicy instead of raising: {count: 0, limit: -1} for a
resource type, and zero counts with -1 limits for the users summary.
"""
import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple

import httpx

from app.core import config
from app.core.errors import UnknownResourceType
from app.core.logging_config import sanitize_log_data
from app.core.plan_limits import UNLIMITED

logger = logging.getLogger(__name__)

# Resource type -> URL segment of its limit-info endpoint
RESOURCE_PATHS: Dict[str, str] = {
    "establishments": "establishments",
    "emission_points": "emission-points",
    "warehouses": "warehouses",
    "contacts": "contacts",
    "users": "company-users",
}

# The company-users endpoint answers with both quotas at once
USER_SUMMARY_FIELDS: Tuple[Tuple[str, str], ...] = (
    ("total_count", "total_limit"),
    ("sellers_count", "sellers_limit"),
)


@dataclass(frozen=True)
class FailOpenPolicy:
    """What to report when limit info cannot be fetched."""
    count: int = 0
    limit: int = UNLIMITED

    @property
    def default(self) -> Dict[str, int]:
        return {"count": self.count, "limit": self.limit}

    @property
    def user_summary_default(self) -> Dict[str, int]:
        summary = {}
        for count_field, limit_field in USER_SUMMARY_FIELDS:
            summary[count_field] = self.count
            summary[limit_field] = self.limit
        return summary

    def default_for(self, resource_type: str) -> Dict[str, int]:
        return self.user_summary_default if resource_type == "users" else self.default

    def fallback(self, resource_type: str, company_id: int, reason: str) -> Dict[str, int]:
        logger.warning(
            f"Limit info unavailable, reporting unlimited: resource={resource_type}, "
            f"company_id={company_id}, reason={reason}"
        )
        return self.default_for(resource_type)


LIMIT_INFO_FAIL_OPEN = FailOpenPolicy()


def _valid_pair(count: Any, limit: Any) -> bool:
    for value in (count, limit):
        if isinstance(value, bool) or not isinstance(value, int):
            return False
    return count >= 0 and limit >= UNLIMITED


def parse_limit_info(body: Any) -> Optional[Dict[str, int]]:
    """Return {count, limit} from a response body, or None if it is malformed."""
    if not isinstance(body, dict):
        return None
    count = body.get("count")
    limit = body.get("limit")
    if not _valid_pair(count, limit):
        return None
    return {"count": count, "limit": limit}


def parse_user_limit_info(body: Any) -> Optional[Dict[str, int]]:
    """Return the users/sellers summary from a response body, or None if it is malformed."""
    if not isinstance(body, dict):
        return None
    summary = {}
    for count_field, limit_field in USER_SUMMARY_FIELDS:
        count = body.get(count_field)
        limit = body.get(limit_field)
        if not _valid_pair(count, limit):
            return None
        summary[count_field] = count
        summary[limit_field] = limit
    return summary


class LimitInfoClient:
    """
    Fetches GET {base_url}/{resource}/company/{company_id}/limit-info.

    "users" maps to the company-users endpoint, which returns the
    users/sellers summary instead of {count, limit}.

    Args:
        base_url: API base URL (defaults to LIMIT_INFO_API_URL)
        timeout: Seconds before the request is abandoned
        policy: Fail-open policy applied on any failure
        transport: Optional httpx transport (tests use httpx.MockTransport)
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        policy: FailOpenPolicy = LIMIT_INFO_FAIL_OPEN,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self.base_url = (base_url or config.LIMIT_INFO_API_URL).rstrip("/")
        self.timeout = timeout if timeout is not None else config.LIMIT_INFO_TIMEOUT_SECONDS
        self.policy = policy
        self.transport = transport

    def url_for(self, resource_type: str, company_id: int) -> str:
        try:
            segment = RESOURCE_PATHS[resource_type]
        except KeyError:
            raise UnknownResourceType(resource_type) from None
        return f"{self.base_url}/{segment}/company/{company_id}/limit-info"

    def get_limit_info(
        self,
        resource_type: str,
        company_id: int,
        headers: Optional[Dict[str, str]] = None,
    ) -> Dict[str, int]:
        url = self.url_for(resource_type, company_id)
        logger.debug(f"Fetching limit info: url={url}, headers={sanitize_log_data(headers or {})}")

        try:
            with httpx.Client(timeout=self.timeout, transport=self.transport) as client:
                response = client.get(url, headers=headers)
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            return self.policy.fallback(resource_type, company_id, f"request failed: {e.__class__.__name__}")

        if not response.is_success:
            return self.policy.fallback(resource_type, company_id, f"status {response.status_code}")

        try:
            body = response.json()
        except ValueError:
            return self.policy.fallback(resource_type, company_id, "body is not JSON")

        parse = parse_user_limit_info if resource_type == "users" else parse_limit_info
        limit_info = parse(body)
        if limit_info is None:
            return self.policy.fallback(resource_type, company_id, "malformed body")

        return limit_info

    def get_user_limit_info(self, company_id: int, headers: Optional[Dict[str, str]] = None) -> Dict[str, int]:
        """Users and sellers counts and limits of a company."""
        return self.get_limit_info("users", company_id, headers=headers)
