"""
Database models module.

This module imports all database models to ensure they are registered with SQLAlchemy's Base.metadata
before table creation.

All models must be imported here to be included in database migrations and table creation.
"""
from app.db.models.subscription_plan import SubscriptionPlan
from app.db.models.company import Company
from app.db.models.establishment import Establishment
from app.db.models.emission_point import EmissionPoint
from app.db.models.warehouse import Warehouse
from app.db.models.contact import Contact
from app.db.models.user import User, CompanyUser

# Explicitly export all models for clarity
__all__ = [
    "SubscriptionPlan",
    "Company",
    "Establishment",
    "EmissionPoint",
    "Warehouse",
    "Contact",
    "User",
    "CompanyUser",
]
