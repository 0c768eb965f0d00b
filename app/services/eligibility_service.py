"""
Company Eligibility Service

Rule-based only: a static table of company criteria evaluated against the
student's CGPA and branch. No AI involved, no external calls in evaluation.

Eligible iff CGPA >= threshold AND (branches unrestricted OR branch in set).
"""

import logging
from typing import Dict, List, Optional

from app.core.exceptions import NotFound, ValidationFailed
from app.models.eligibility import CompanyRule, EligibilityResult
from app.services.store_service import CompanyCheckStore, get_check_store
from app.utils.validators import is_valid_cgpa

logger = logging.getLogger(__name__)


COMPANY_RULES: Dict[str, CompanyRule] = {
    "TCS": CompanyRule(name="TCS", min_cgpa=6.0),
    "Infosys": CompanyRule(name="Infosys", min_cgpa=6.5),
    "Accenture": CompanyRule(name="Accenture", min_cgpa=6.5),
    "Amazon": CompanyRule(
        name="Amazon",
        min_cgpa=7.0,
        branches=("Computer Science", "Information Technology", "Electronics & Communication"),
        preferred_branches=True,
    ),
}


def get_rule(company_name: str) -> CompanyRule:
    rule = COMPANY_RULES.get(company_name)
    if rule is None:
        raise NotFound(f"Company '{company_name}' not found")
    return rule


def list_rules() -> List[CompanyRule]:
    return list(COMPANY_RULES.values())


def evaluate_eligibility(rule: CompanyRule, cgpa: float, branch: str) -> EligibilityResult:
    """Evaluate one candidate against one company rule. Pure function."""
    meets_cgpa = cgpa >= rule.min_cgpa
    meets_branch = rule.unrestricted or branch in rule.branches

    reasons = []
    if meets_cgpa:
        reasons.append(f"CGPA: {cgpa} meets the required {rule.min_cgpa}")
    else:
        gap = rule.min_cgpa - cgpa
        reasons.append(
            f"CGPA: {cgpa} is below the required {rule.min_cgpa} "
            f"(you need {gap:.2f} more CGPA points)"
        )

    if meets_branch:
        reasons.append(f"Branch: {branch} is eligible")
    else:
        reasons.append(
            f"Branch: {branch} is not in the eligible branches ({', '.join(rule.branches)})"
        )

    note = None
    if rule.preferred_branches and not meets_branch:
        note = (
            f"Note: {rule.name} prefers {', '.join(rule.branches)} branches, "
            "but other branches may also be considered."
        )

    return EligibilityResult(
        company=rule.name,
        eligible=meets_cgpa and meets_branch,
        cgpa=cgpa,
        branch=branch,
        criteria_met={"cgpa": meets_cgpa, "branch": meets_branch},
        reasons=reasons,
        note=note,
    )


class EligibilityService:
    """Checks a profile against a company and records the check."""

    def __init__(self, check_store: CompanyCheckStore):
        self.check_store = check_store

    def check(self, profile: dict, company_name: str) -> EligibilityResult:
        rule = get_rule(company_name)

        cgpa: Optional[float] = profile.get("cgpa")
        branch: Optional[str] = profile.get("branch")
        if cgpa is None or not is_valid_cgpa(cgpa):
            raise ValidationFailed("Add a valid CGPA (0-10) to your profile first")
        if not branch:
            raise ValidationFailed("Add your branch to your profile first")

        result = evaluate_eligibility(rule, float(cgpa), branch)
        self.check_store.insert(
            user_id=profile["id"],
            company_name=rule.name,
            is_eligible=result.eligible,
            reason=result.summary,
            criteria_met=result.criteria_met,
        )
        logger.info("Eligibility check user=%s company=%s eligible=%s",
                    profile["id"], rule.name, result.eligible)
        return result

    def history(self, user_id: int, limit: int = 10) -> List[dict]:
        return self.check_store.list_recent(user_id, limit=limit)


def get_eligibility_service() -> EligibilityService:
    return EligibilityService(get_check_store())
