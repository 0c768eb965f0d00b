"""
Small profile helpers shared by the signup, profile and dashboard flows.
"""

from typing import Iterable, List, Optional, Union

PROFILE_FIELDS = ("name", "email", "college", "branch", "year", "cgpa")


def parse_skills(skills: Union[str, Iterable[str], None]) -> List[str]:
    """
    Normalise skills input to a clean list.
    Accepts "Python, SQL , " or ["Python", " SQL", ""].
    """
    if not skills:
        return []
    if isinstance(skills, str):
        skills = skills.split(",")
    return [s.strip() for s in skills if s and s.strip()]


def is_valid_cgpa(cgpa) -> bool:
    try:
        value = float(cgpa)
    except (TypeError, ValueError):
        return False
    return 0 <= value <= 10


def profile_completion(profile: Optional[dict]) -> int:
    """Percentage of filled profile fields; skills count as a bonus slot."""
    if not profile:
        return 0

    filled = [f for f in PROFILE_FIELDS if profile.get(f) not in (None, "")]
    has_skills = bool(profile.get("skills"))
    total = len(PROFILE_FIELDS) + (1 if has_skills else 0)
    done = len(filled) + (1 if has_skills else 0)
    return round(done / total * 100)


def ordinal_suffix(num: int) -> str:
    if 10 <= num % 100 <= 20:
        return "th"
    return {1: "st", 2: "nd", 3: "rd"}.get(num % 10, "th")


def year_label(year: Optional[int]) -> Optional[str]:
    if not year:
        return None
    return f"{year}{ordinal_suffix(year)} Year"
