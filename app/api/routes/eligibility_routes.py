"""
Eligibility Routes

GET /eligibility/companies - Company rule table
POST /eligibility/check/{company} - Check own profile against a company
GET /eligibility/history - Last 10 checks
"""

from typing import List

from fastapi import APIRouter, Depends

from app.core.auth import get_current_user
from app.services.eligibility_service import (
    EligibilityService, get_eligibility_service, list_rules
)
from app.schemas.schemas import (
    CompanyRuleResponse, EligibilityResponse, EligibilityCheckResponse
)

router = APIRouter(prefix="/eligibility", tags=["Eligibility"])


@router.get("/companies", response_model=List[CompanyRuleResponse])
async def get_companies():
    """All companies with their criteria."""
    return [
        CompanyRuleResponse(
            name=rule.name,
            min_cgpa=rule.min_cgpa,
            branches=list(rule.branches),
            branch_label=rule.branch_label,
            preferred_branches=rule.preferred_branches,
            max_backlogs=rule.max_backlogs,
        )
        for rule in list_rules()
    ]


@router.post("/check/{company}", response_model=EligibilityResponse)
async def check_eligibility(
    company: str,
    user: dict = Depends(get_current_user),
    service: EligibilityService = Depends(get_eligibility_service)
):
    """
    Evaluate the caller's CGPA and branch against one company.

    The result is recorded in the check history.
    """
    result = service.check(user, company)
    return EligibilityResponse(
        company=result.company,
        eligible=result.eligible,
        cgpa=result.cgpa,
        branch=result.branch,
        criteria_met=result.criteria_met,
        reasons=result.reasons,
        note=result.note,
        summary=result.summary,
    )


@router.get("/history", response_model=List[EligibilityCheckResponse])
async def get_history(
    user: dict = Depends(get_current_user),
    service: EligibilityService = Depends(get_eligibility_service)
):
    """Most recent eligibility checks."""
    return service.history(user["id"])
