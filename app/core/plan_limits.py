"""
Plan limits vocabulary and resolution rules.

Single source of truth for how a plan's limits document is read.
-1 means unlimited quota for that resource type.
"""
import logging
from typing import Any, Dict, List, Mapping, Optional

from app.core.errors import InvalidPlanData, UnknownResourceType

logger = logging.getLogger(__name__)

UNLIMITED = -1

# Resource type -> quota key in the plan's limits document
RESOURCE_LIMIT_KEYS: Dict[str, str] = {
    "establishments": "max_establishments",
    "emission_points": "max_emission_points",
    "warehouses": "max_warehouses",
    "contacts": "max_contacts",
    "users": "max_total_users",
    "sellers": "max_sellers",
}

QUOTA_KEYS: List[str] = list(RESOURCE_LIMIT_KEYS.values())

# Keys resolved through other keys when absent, tried in order.
# max_total_users predates its own key: plans without it cap users by sellers.
FALLBACK_RULES: Dict[str, List[str]] = {
    "max_total_users": ["max_sellers"],
}

# Plans seeded by the baseline migration
DEFAULT_PLAN_CATALOG: List[Dict[str, Any]] = [
    {
        "name": "Plan Pyme",
        "price": "45.00",
        "limits": {
            "max_sellers": 3,
            "max_establishments": 1,
            "max_warehouses": 1,
            "max_inventory_items": 500,
            "storage_gb": 1,
        },
        "modules": {"audit": True, "logistics": False, "business_rules": True, "sri": True},
    },
    {
        "name": "Plan Crecimiento",
        "price": "95.00",
        "limits": {
            "max_sellers": 10,
            "max_establishments": 3,
            "max_warehouses": 3,
            "max_inventory_items": 5000,
            "storage_gb": 10,
        },
        "modules": {"audit": True, "logistics": True, "business_rules": True, "sri": True},
    },
    {
        "name": "Plan Corporativo",
        "price": "190.00",
        "limits": {
            "max_sellers": -1,
            "max_establishments": -1,
            "max_warehouses": -1,
            "max_inventory_items": -1,
            "storage_gb": 50,
        },
        "modules": {"audit": True, "logistics": True, "business_rules": True, "sri": True},
    },
]


def limit_key_for(resource_type: str) -> str:
    """Map a resource type (e.g. "warehouses") to its quota key."""
    try:
        return RESOURCE_LIMIT_KEYS[resource_type]
    except KeyError:
        raise UnknownResourceType(resource_type) from None


def _limit_problem(value: Any) -> Optional[str]:
    """Return why a limit value is illegal, or None when it is legal."""
    if isinstance(value, bool) or not isinstance(value, int):
        return "not an integer"
    if value < UNLIMITED:
        return "negative values other than -1 are not allowed"
    return None


def coerce_limit(value: Any, key: str) -> int:
    """
    Return a usable limit for a stored value.

    Illegal values never propagate: they are logged and treated as unlimited.
    """
    problem = _limit_problem(value)
    if problem is None:
        return value
    error = InvalidPlanData(key, value, problem)
    logger.warning(f"Invalid plan data, treating as unlimited: {error}")
    return UNLIMITED


def _stored(limits: Mapping[str, Any], key: str) -> bool:
    return limits.get(key) is not None


def resolve_limit(limits: Optional[Mapping[str, Any]], key: str) -> int:
    """
    Resolve the effective limit for a quota key.

    Args:
        limits: The plan's limits document (None is treated as empty)
        key: Quota key, e.g. "max_establishments"

    Returns:
        Stored value if present, else the first present fallback key,
        else -1. Unknown keys resolve to -1.
    """
    limits = limits or {}
    if _stored(limits, key):
        return coerce_limit(limits[key], key)

    for fallback_key in FALLBACK_RULES.get(key, []):
        if _stored(limits, fallback_key):
            return coerce_limit(limits[fallback_key], fallback_key)

    return UNLIMITED


def resolve_all_limits(limits: Optional[Mapping[str, Any]]) -> Dict[str, int]:
    """Resolve every known quota key for a limits document."""
    return {key: resolve_limit(limits, key) for key in QUOTA_KEYS}


def materialize_fallbacks(limits: Optional[Mapping[str, Any]]) -> Dict[str, Any]:
    """
    Return a copy of the document with fallback-resolved keys written out.

    Keys already stored are left untouched, so applying this twice is the
    same as applying it once.
    """
    result = dict(limits or {})
    for key in FALLBACK_RULES:
        if not _stored(result, key):
            result[key] = resolve_limit(result, key)
    return result


def validate_limits(limits: Any) -> Dict[str, Any]:
    """
    Strict validation for administrative plan edits.

    Raises:
        InvalidPlanData: when a quota value is illegal, or when the sellers cap
            exceeds the total users cap
    """
    if not isinstance(limits, dict):
        raise InvalidPlanData("limits", limits, "must be an object")

    # A quota key sent as null is rejected, never read as "absent"
    for key in QUOTA_KEYS:
        if key not in limits:
            continue
        problem = _limit_problem(limits[key])
        if problem:
            raise InvalidPlanData(key, limits[key], problem)

    max_total = limits.get("max_total_users")
    max_sellers = limits.get("max_sellers")
    if (
        max_total is not None
        and max_sellers is not None
        and max_total != UNLIMITED
        and max_sellers != UNLIMITED
        and max_sellers > max_total
    ):
        raise InvalidPlanData(
            "max_sellers",
            max_sellers,
            f"cannot exceed max_total_users ({max_total})",
        )

    return limits
