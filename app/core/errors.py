"""
Error types for the entitlement engine.

Quota exhaustion is NOT an error: it is returned as a QuotaDecision.
These exceptions cover system faults and invalid input only; each carries
the HTTP status the API answers with.
"""


class EntitlementError(Exception):
    """Base class for entitlement engine errors."""
    code = "entitlement_error"
    status_code = 500


class BackingStoreUnavailable(EntitlementError):
    """The store holding plans or resource rows could not be queried."""
    code = "backing_store_unavailable"
    status_code = 503


class InvalidPlanData(EntitlementError, ValueError):
    """A stored or submitted limit value is outside the legal domain."""
    code = "invalid_plan_data"
    status_code = 400

    def __init__(self, key: str, value, reason: str):
        self.key = key
        self.value = value
        self.reason = reason
        super().__init__(f"Invalid value for {key!r}: {value!r} ({reason})")


class UnknownResourceType(EntitlementError, KeyError):
    code = "unknown_resource_type"
    status_code = 404

    def __init__(self, resource_type: str):
        self.resource_type = resource_type
        super().__init__(resource_type)

    def __str__(self):
        return f"Unknown resource type: {self.resource_type}"


class CompanyNotFound(EntitlementError):
    code = "not_found"
    status_code = 404

    def __init__(self, company_id: int):
        self.company_id = company_id
        super().__init__(f"Company {company_id} not found")


class PlanNotFound(EntitlementError):
    code = "not_found"
    status_code = 404

    def __init__(self, plan_ref):
        self.plan_ref = plan_ref
        super().__init__(f"Subscription plan {plan_ref!r} not found")


class ResourceNotFound(EntitlementError):
    code = "not_found"
    status_code = 404

    def __init__(self, resource_type: str, resource_id: int):
        self.resource_type = resource_type
        self.resource_id = resource_id
        super().__init__(f"{resource_type} {resource_id} not found")


class ResourceConflict(EntitlementError):
    """The row to create already exists (e.g. user already assigned)."""
    code = "conflict"
    status_code = 409
