"""
Plan-based usage limits configuration.

Single source of truth for which subscription counter and which plan limit
govern each billable resource. A limit equal to UNLIMITED means the plan
places no cap on that resource.
"""
import enum
from dataclasses import dataclass
from typing import Dict, Optional

from jobboard.core.principals import EntityKind

UNLIMITED = 999999


class ResourceKind(str, enum.Enum):
    """Billable resources counted against a subscription."""
    APPLICATION = "application"
    JOB = "job"
    INTERNSHIP = "internship"


@dataclass(frozen=True)
class QuotaRule:
    owner_kind: EntityKind
    counter: str      # column on the subscription row
    plan_limit: str   # column on the plan row
    label: str        # human-readable resource name for messages


QUOTA_RULES: Dict[ResourceKind, QuotaRule] = {
    ResourceKind.APPLICATION: QuotaRule(
        owner_kind=EntityKind.USER,
        counter="applications_used",
        plan_limit="user_applications_limit",
        label="Application",
    ),
    ResourceKind.JOB: QuotaRule(
        owner_kind=EntityKind.COMPANY,
        counter="jobs_posted",
        plan_limit="company_jobs_limit",
        label="Job posting",
    ),
    ResourceKind.INTERNSHIP: QuotaRule(
        owner_kind=EntityKind.COMPANY,
        counter="internships_posted",
        plan_limit="company_internships_limit",
        label="Internship posting",
    ),
}

# Seed values for the reference plans
FREE_PLAN_LIMITS = {
    "user_applications_limit": 5,
    "company_jobs_limit": 1,
    "company_internships_limit": 2,
}

PREMIUM_PLAN_LIMITS = {
    "user_applications_limit": UNLIMITED,
    "company_jobs_limit": UNLIMITED,
    "company_internships_limit": UNLIMITED,
}


def is_unlimited(limit: Optional[int]) -> bool:
    """A missing limit or the sentinel value both mean no cap."""
    return limit is None or limit >= UNLIMITED


def resource_kind_for_job_type(job_type: str) -> ResourceKind:
    """Internships have their own counter; every other job type counts as a job."""
    value = getattr(job_type, "value", job_type)
    return ResourceKind.INTERNSHIP if value == "INTERNSHIP" else ResourceKind.JOB


def rules_for_owner(owner_kind: EntityKind) -> Dict[ResourceKind, QuotaRule]:
    """All quota rules that apply to an entity kind."""
    return {kind: rule for kind, rule in QUOTA_RULES.items() if rule.owner_kind is owner_kind}
