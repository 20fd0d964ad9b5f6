"""
Unit tests for plan limits resolution and validation.
"""
import logging

import pytest

from app.core.errors import InvalidPlanData, UnknownResourceType
from app.core.plan_limits import (
    DEFAULT_PLAN_CATALOG,
    QUOTA_KEYS,
    UNLIMITED,
    coerce_limit,
    limit_key_for,
    materialize_fallbacks,
    resolve_all_limits,
    resolve_limit,
    validate_limits,
)


def test_resolve_stored_value():
    """Test a stored key resolves to its value."""
    assert resolve_limit({"max_establishments": 2}, "max_establishments") == 2


def test_resolve_zero_is_kept():
    """Test 0 is a real limit, not unlimited."""
    assert resolve_limit({"max_warehouses": 0}, "max_warehouses") == 0


def test_resolve_unknown_key_is_unlimited():
    """Test keys no plan defines fail open."""
    assert resolve_limit({"max_sellers": 3}, "max_contacts") == UNLIMITED
    assert resolve_limit({}, "max_anything") == UNLIMITED


def test_resolve_empty_or_missing_document():
    """Test None and {} documents resolve every key to unlimited."""
    assert resolve_limit(None, "max_establishments") == UNLIMITED
    assert resolve_all_limits({}) == {key: UNLIMITED for key in QUOTA_KEYS}


def test_total_users_falls_back_to_sellers():
    """Test max_total_users is read from max_sellers when absent."""
    assert resolve_limit({"max_sellers": 5}, "max_total_users") == 5


def test_total_users_stored_value_wins_over_fallback():
    """Test a stored max_total_users is used even when max_sellers differs."""
    assert resolve_limit({"max_sellers": 3, "max_total_users": 8}, "max_total_users") == 8


def test_total_users_without_sellers_is_unlimited():
    """Test max_total_users is unlimited when neither key exists."""
    assert resolve_limit({"max_establishments": 1}, "max_total_users") == UNLIMITED


def test_null_value_counts_as_absent():
    """Test a null stored value falls through to the fallback chain."""
    assert resolve_limit({"max_total_users": None, "max_sellers": 4}, "max_total_users") == 4


@pytest.mark.parametrize("bad_value", [-2, -100, "3", 2.5, True, [1]])
def test_invalid_stored_value_is_unlimited(bad_value, caplog):
    """Test illegal stored values are logged and treated as unlimited."""
    with caplog.at_level(logging.WARNING, logger="app.core.plan_limits"):
        assert resolve_limit({"max_warehouses": bad_value}, "max_warehouses") == UNLIMITED
    assert "Invalid plan data" in caplog.text


def test_coerce_limit_passes_legal_values():
    assert coerce_limit(-1, "max_sellers") == -1
    assert coerce_limit(0, "max_sellers") == 0
    assert coerce_limit(42, "max_sellers") == 42


def test_limit_key_for_registered_types():
    """Test every resource type maps to its quota key."""
    assert limit_key_for("establishments") == "max_establishments"
    assert limit_key_for("emission_points") == "max_emission_points"
    assert limit_key_for("warehouses") == "max_warehouses"
    assert limit_key_for("contacts") == "max_contacts"
    assert limit_key_for("users") == "max_total_users"
    assert limit_key_for("sellers") == "max_sellers"


def test_limit_key_for_unknown_type():
    with pytest.raises(UnknownResourceType) as exc_info:
        limit_key_for("invoices")
    assert "invoices" in str(exc_info.value)


def test_materialize_fallbacks_writes_missing_key():
    """Test max_total_users is written from max_sellers."""
    limits = {"max_sellers": 5, "max_establishments": 2}
    result = materialize_fallbacks(limits)
    assert result["max_total_users"] == 5
    assert "max_total_users" not in limits


def test_materialize_fallbacks_keeps_existing_key():
    limits = {"max_sellers": 3, "max_total_users": 10}
    assert materialize_fallbacks(limits) == limits


def test_materialize_fallbacks_is_idempotent():
    """Test applying the backfill twice equals applying it once."""
    for plan in DEFAULT_PLAN_CATALOG:
        once = materialize_fallbacks(plan["limits"])
        assert materialize_fallbacks(once) == once


def test_materialize_fallbacks_preserves_resolution():
    """Test resolved limits are identical before and after the backfill."""
    for plan in DEFAULT_PLAN_CATALOG:
        assert resolve_all_limits(materialize_fallbacks(plan["limits"])) == resolve_all_limits(plan["limits"])


def test_validate_limits_accepts_catalog():
    for plan in DEFAULT_PLAN_CATALOG:
        assert validate_limits(dict(plan["limits"])) == plan["limits"]


def test_validate_limits_rejects_negative_value():
    with pytest.raises(InvalidPlanData) as exc_info:
        validate_limits({"max_establishments": -5})
    assert exc_info.value.key == "max_establishments"
    assert exc_info.value.value == -5


def test_validate_limits_rejects_non_integer():
    with pytest.raises(InvalidPlanData):
        validate_limits({"max_sellers": "ten"})


def test_validate_limits_rejects_non_object():
    with pytest.raises(InvalidPlanData):
        validate_limits(["max_sellers", 3])


def test_validate_limits_sellers_cannot_exceed_total_users():
    with pytest.raises(InvalidPlanData) as exc_info:
        validate_limits({"max_sellers": 5, "max_total_users": 3})
    assert exc_info.value.key == "max_sellers"
    assert "max_total_users" in exc_info.value.reason


@pytest.mark.parametrize("limits", [
    {"max_sellers": -1, "max_total_users": 3},
    {"max_sellers": 5, "max_total_users": -1},
    {"max_sellers": 3, "max_total_users": 3},
    {"max_sellers": 5},
])
def test_validate_limits_sellers_total_users_allowed(limits):
    assert validate_limits(limits) == limits


def test_validate_limits_ignores_non_quota_keys():
    """Test informational keys like storage_gb are not quota-checked."""
    assert validate_limits({"storage_gb": 1.5}) == {"storage_gb": 1.5}


def test_validate_limits_rejects_null_quota_value():
    """Test a quota key sent as null cannot drop a cap to unlimited."""
    with pytest.raises(InvalidPlanData) as exc_info:
        validate_limits({"max_establishments": None})
    assert exc_info.value.key == "max_establishments"
