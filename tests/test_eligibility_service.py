import pytest

from app.core.exceptions import NotFound, ValidationFailed
from app.models.eligibility import CompanyRule
from app.services.eligibility_service import (
    COMPANY_RULES,
    EligibilityService,
    evaluate_eligibility,
    get_rule,
    list_rules,
)
from tests.fakes import FakeCheckStore


def test_rule_table():
    assert [r.name for r in list_rules()] == ["TCS", "Infosys", "Accenture", "Amazon"]
    assert COMPANY_RULES["TCS"].min_cgpa == 6.0
    assert COMPANY_RULES["Infosys"].unrestricted
    assert not COMPANY_RULES["Amazon"].unrestricted
    assert COMPANY_RULES["Amazon"].branch_label.endswith("preferred")


def test_low_threshold_all_branches_is_eligible():
    result = evaluate_eligibility(get_rule("TCS"), 6.2, "Mechanical")
    assert result.eligible
    assert result.criteria_met == {"cgpa": True, "branch": True}
    assert result.note is None


def test_cgpa_and_branch_failures_both_listed():
    result = evaluate_eligibility(get_rule("Amazon"), 6.8, "Mechanical")

    assert not result.eligible
    assert result.criteria_met == {"cgpa": False, "branch": False}
    assert "below the required 7.0" in result.reasons[0]
    assert "0.20 more CGPA points" in result.reasons[0]
    assert "not in the eligible branches" in result.reasons[1]
    assert "Computer Science" in result.reasons[1]
    assert result.note and "prefers" in result.note


def test_threshold_is_inclusive():
    result = evaluate_eligibility(CompanyRule(name="X", min_cgpa=7.0), 7.0, "Civil")
    assert result.eligible


def test_branch_only_failure():
    result = evaluate_eligibility(get_rule("Amazon"), 9.1, "Civil")
    assert not result.eligible
    assert result.criteria_met == {"cgpa": True, "branch": False}


def test_summary_includes_reasons():
    result = evaluate_eligibility(get_rule("Amazon"), 8.0, "Information Technology")
    assert result.summary.startswith("You meet all the eligibility criteria for Amazon.")
    assert "- Branch: Information Technology is eligible" in result.summary


def test_unknown_company():
    with pytest.raises(NotFound):
        get_rule("Initech")


# ============================================================
# Service
# ============================================================

def test_check_records_history():
    store = FakeCheckStore()
    service = EligibilityService(store)
    profile = {"id": 5, "cgpa": 6.6, "branch": "Mechanical"}

    service.check(profile, "Infosys")
    service.check(profile, "Amazon")

    history = service.history(5)
    assert [h["company_name"] for h in history] == ["Amazon", "Infosys"]
    assert history[0]["is_eligible"] is False
    assert history[1]["is_eligible"] is True
    assert "Infosys" in history[1]["reason"]


@pytest.mark.parametrize("profile", [
    {"id": 1, "cgpa": None, "branch": "Civil"},
    {"id": 1, "cgpa": 11, "branch": "Civil"},
    {"id": 1, "cgpa": 7.5, "branch": ""},
])
def test_check_needs_cgpa_and_branch(profile):
    store = FakeCheckStore()
    with pytest.raises(ValidationFailed):
        EligibilityService(store).check(profile, "TCS")
    assert store.rows == []
