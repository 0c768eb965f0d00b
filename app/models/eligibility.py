from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

ALL_BRANCHES = "All"


@dataclass(frozen=True)
class CompanyRule:
    name: str
    min_cgpa: float
    branches: Tuple[str, ...] = (ALL_BRANCHES,)
    preferred_branches: bool = False
    max_backlogs: int = 0

    @property
    def unrestricted(self) -> bool:
        return ALL_BRANCHES in self.branches

    @property
    def branch_label(self) -> str:
        if self.unrestricted:
            return ALL_BRANCHES
        label = ", ".join(self.branches)
        return f"{label} preferred" if self.preferred_branches else label


@dataclass
class EligibilityResult:
    company: str
    eligible: bool
    cgpa: float
    branch: str
    criteria_met: Dict[str, bool]
    reasons: List[str] = field(default_factory=list)
    note: Optional[str] = None

    @property
    def summary(self) -> str:
        """Human-readable explanation stored with the check."""
        if self.eligible:
            head = f"You meet all the eligibility criteria for {self.company}."
        else:
            head = f"You do not meet the eligibility criteria for {self.company}."
        lines = [head, ""] + [f"- {r}" for r in self.reasons]
        if self.note:
            lines += ["", self.note]
        return "\n".join(lines)
