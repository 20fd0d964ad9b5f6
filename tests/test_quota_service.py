"""
Unit tests for the quota service: counting, evaluation and limit info.
"""
import logging

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.db.base import Base
from app.db.models import Company, CompanyUser, Contact, Establishment, SubscriptionPlan, User
from app.core.errors import BackingStoreUnavailable, CompanyNotFound, UnknownResourceType
from app.core.plan_limits import UNLIMITED
from app.services import quota_service
from app.services.quota_service import (
    LIMIT_INFO_FALLBACK,
    build_decision,
    decide,
    evaluate,
    get_company_limits,
    get_limit_info,
    get_user_limit_info,
)
from app.services.resource_counter import count_active, count_active_by_type


# Setup in-memory SQLite database for testing
TEST_DATABASE_URL = "sqlite:///:memory:"
test_engine = create_engine(
    TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=test_engine)


@pytest.fixture(scope="function")
def db():
    """Create a fresh database for each test."""
    Base.metadata.create_all(bind=test_engine)
    db = TestSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=test_engine)


def make_company(db, limits=None, ruc_nit="0990000001001"):
    """Create a company, on a fresh plan with `limits` unless limits is None."""
    plan = None
    if limits is not None:
        plan = SubscriptionPlan(name=f"Plan {ruc_nit}", price=45, limits=limits, modules={})
        db.add(plan)
        db.flush()
    company = Company(name="Comercial Andina", ruc_nit=ruc_nit, plan_id=plan.id if plan else None)
    db.add(company)
    db.commit()
    db.refresh(company)
    return company


def add_establishments(db, company, active=0, inactive=0):
    for i in range(active + inactive):
        db.add(Establishment(
            company_id=company.id,
            code=f"{i + 1:03d}",
            name=f"Sucursal {i + 1}",
            is_active=i < active,
        ))
    db.commit()


def add_members(db, company, roles, active=True):
    for i, role in enumerate(roles):
        user = User(full_name=f"User {role} {i}", email=f"{role.lower()}{i}.{company.id}.{active}@example.com")
        db.add(user)
        db.flush()
        db.add(CompanyUser(company_id=company.id, user_id=user.id, role=role, is_active=active))
    db.commit()


# ---------------------------------------------------------------------------
# decide / build_decision
# ---------------------------------------------------------------------------

def test_decide_under_limit():
    assert decide(1, 3) == (True, 2)


def test_decide_at_limit_denies():
    assert decide(3, 3) == (False, 0)


def test_decide_over_limit_remaining_never_negative():
    """Test a count above the limit (after a downgrade) reports 0 remaining."""
    assert decide(5, 2) == (False, 0)


def test_decide_zero_limit_denies():
    """Test a limit of 0 forbids the resource entirely."""
    assert decide(0, 0) == (False, 0)


def test_decide_unlimited():
    """Test -1 always allows and reports remaining -1."""
    assert decide(0, UNLIMITED) == (True, UNLIMITED)
    assert decide(10_000, UNLIMITED) == (True, UNLIMITED)


def test_decide_invalid_negative_limit_is_unlimited(caplog):
    with caplog.at_level(logging.WARNING, logger="app.services.quota_service"):
        assert decide(4, -7) == (True, UNLIMITED)
    assert "Negative limit" in caplog.text


@pytest.mark.parametrize("count,limit", [(0, 0), (0, 1), (2, 3), (3, 3), (7, 3), (0, -1), (9, -1)])
def test_decision_fields_are_consistent(count, limit):
    """Test allowed and remaining always agree with count and limit."""
    decision = build_decision("warehouses", count, limit)
    assert decision.limit_key == "max_warehouses"
    if decision.unlimited:
        assert decision.allowed and decision.remaining == UNLIMITED
    else:
        assert decision.allowed == (count < limit)
        assert decision.remaining == max(limit - count, 0)
        assert decision.remaining >= 0


def test_decision_to_dict():
    data = build_decision("establishments", 1, 2).to_dict()
    assert data == {
        "resource": "establishments",
        "limit_key": "max_establishments",
        "count": 1,
        "limit": 2,
        "allowed": True,
        "remaining": 1,
        "unlimited": False,
    }


# ---------------------------------------------------------------------------
# counting / evaluate
# ---------------------------------------------------------------------------

def test_count_active_ignores_inactive(db):
    """Test deactivated rows do not count."""
    company = make_company(db, {"max_establishments": 3})
    add_establishments(db, company, active=2, inactive=4)
    assert count_active(db, company.id, "establishments") == 2


def test_count_active_is_per_company(db):
    company = make_company(db, {"max_establishments": 3})
    other = make_company(db, {"max_establishments": 3}, ruc_nit="0990000002001")
    add_establishments(db, company, active=1)
    add_establishments(db, other, active=2)
    assert count_active(db, company.id, "establishments") == 1
    assert count_active(db, other.id, "establishments") == 2


def test_count_active_unknown_type(db):
    company = make_company(db, {})
    with pytest.raises(UnknownResourceType):
        count_active(db, company.id, "invoices")


def test_count_sellers_by_role(db):
    """Test sellers are memberships whose role mentions seller or vendedor."""
    company = make_company(db, {"max_sellers": 5})
    add_members(db, company, ["seller", "Vendedor", "Senior Seller", "admin", "accountant"])
    add_members(db, company, ["seller"], active=False)

    assert count_active(db, company.id, "users") == 5
    assert count_active(db, company.id, "sellers") == 3


def test_count_active_by_type(db):
    company = make_company(db, {})
    add_establishments(db, company, active=1)
    db.add(Contact(company_id=company.id, name="Cliente final", is_active=True))
    db.commit()

    counts = count_active_by_type(db, company.id)
    assert counts["establishments"] == 1
    assert counts["contacts"] == 1
    assert counts["warehouses"] == 0


def test_evaluate_counts_only_active(db):
    """Test a plan with room left, ignoring inactive rows."""
    company = make_company(db, {"max_establishments": 2})
    add_establishments(db, company, active=1, inactive=3)

    decision = evaluate(db, company.id, "establishments")
    assert decision.count == 1
    assert decision.limit == 2
    assert decision.allowed is True
    assert decision.remaining == 1


def test_evaluate_exhausted(db):
    company = make_company(db, {"max_establishments": 2})
    add_establishments(db, company, active=2)

    decision = evaluate(db, company.id, "establishments")
    assert decision.allowed is False
    assert decision.remaining == 0


def test_evaluate_zero_limit(db):
    company = make_company(db, {"max_warehouses": 0})
    decision = evaluate(db, company.id, "warehouses")
    assert decision.count == 0
    assert decision.allowed is False


def test_evaluate_missing_key_is_unlimited(db):
    """Test contacts are unlimited when the plan has no max_contacts."""
    company = make_company(db, {"max_establishments": 1})
    decision = evaluate(db, company.id, "contacts")
    assert decision.limit == UNLIMITED
    assert decision.allowed is True
    assert decision.remaining == UNLIMITED


def test_evaluate_users_falls_back_to_sellers(db):
    """Test a plan without max_total_users caps users by max_sellers."""
    company = make_company(db, {"max_sellers": 2})
    add_members(db, company, ["admin", "seller"])

    decision = evaluate(db, company.id, "users")
    assert decision.limit == 2
    assert decision.allowed is False


def test_evaluate_company_without_plan(db, caplog):
    """Test a company without plan resolves every type as unlimited."""
    company = make_company(db, None)
    with caplog.at_level(logging.WARNING, logger="app.services.quota_service"):
        decision = evaluate(db, company.id, "establishments")
    assert decision.unlimited
    assert "no subscription plan" in caplog.text


def test_evaluate_invalid_stored_limit_is_unlimited(db):
    company = make_company(db, {"max_establishments": -3})
    add_establishments(db, company, active=5)
    decision = evaluate(db, company.id, "establishments")
    assert decision.limit == UNLIMITED
    assert decision.allowed is True


def test_evaluate_unknown_company(db):
    with pytest.raises(CompanyNotFound):
        evaluate(db, 9999, "establishments")


# ---------------------------------------------------------------------------
# limit info
# ---------------------------------------------------------------------------

def test_get_limit_info(db):
    company = make_company(db, {"max_establishments": 2})
    add_establishments(db, company, active=1, inactive=1)
    assert get_limit_info(db, company.id, "establishments") == {"count": 1, "limit": 2}


def test_get_limit_info_is_read_only(db):
    """Test limit info does not bump the company's quota revision."""
    company = make_company(db, {"max_establishments": 2})
    get_limit_info(db, company.id, "establishments")
    db.refresh(company)
    assert company.quota_revision == 0


def test_get_limit_info_store_unavailable_fails_open(db, monkeypatch):
    """Test the read path reports {count: 0, limit: -1} when the store fails."""
    company = make_company(db, {"max_establishments": 2})

    def unavailable(*args, **kwargs):
        raise BackingStoreUnavailable("database is down")

    monkeypatch.setattr(quota_service, "count_active", unavailable)
    assert get_limit_info(db, company.id, "establishments") == LIMIT_INFO_FALLBACK


def test_get_limit_info_unknown_company_still_raises(db):
    with pytest.raises(CompanyNotFound):
        get_limit_info(db, 4242, "establishments")


def test_get_user_limit_info(db):
    company = make_company(db, {"max_sellers": 3, "max_total_users": 5})
    add_members(db, company, ["seller", "vendedor", "admin"])

    assert get_user_limit_info(db, company.id) == {
        "total_count": 3,
        "total_limit": 5,
        "sellers_count": 2,
        "sellers_limit": 3,
    }


def test_get_company_limits(db):
    company = make_company(db, {"max_establishments": 1, "max_sellers": 3})
    add_establishments(db, company, active=1)

    summary = get_company_limits(db, company.id)
    assert summary["company_id"] == company.id
    assert summary["plan"] == f"Plan {company.ruc_nit}"
    assert set(summary["resources"]) == {
        "establishments", "emission_points", "warehouses", "contacts", "users", "sellers",
    }
    establishments = summary["resources"]["establishments"]
    assert establishments["allowed"] is False
    assert establishments["remaining"] == 0
    assert summary["resources"]["users"]["limit"] == 3
    assert summary["resources"]["warehouses"]["unlimited"] is True
