"""Job/candidate match scoring.

Scores how well a candidate fits a job posting on six factors, each scored
0..100 and combined with fixed weights:

- skills (0.40): proficiency against each required skill level
- tech stack (0.20): overlap of LLMs, frameworks and languages
- experience (0.15): years of experience against the job level's range
- location (0.10): work arrangement and place preferences
- salary (0.10): job pay against the candidate's expectation
- cultural fit (0.05): common benefits offered by the company

Everything here is pure: callers build :class:`JobSnapshot` and
:class:`CandidateSnapshot` from database rows and get back a
:class:`MatchScore`.
"""

from __future__ import annotations

import math
from dataclasses import asdict, dataclass, field
from typing import Any, Dict, Iterable, List, Optional, Tuple

WEIGHTS: Dict[str, float] = {
    "skills": 0.40,
    "tech_stack": 0.20,
    "experience": 0.15,
    "location": 0.10,
    "salary": 0.10,
    "cultural_fit": 0.05,
}

TECH_STACK_WEIGHTS = {"models": 0.5, "frameworks": 0.3, "languages": 0.2}

EXPERIENCE_RANGES: Dict[str, Tuple[int, int]] = {
    "entry": (0, 1),
    "junior": (1, 3),
    "mid": (3, 6),
    "senior": (6, 10),
    "lead": (8, 15),
    "principal": (10, 99),
}

VALUED_BENEFITS = (
    "health insurance",
    "remote work",
    "flexible hours",
    "professional development",
    "equity",
)

NEUTRAL_SCORE = 50.0


@dataclass(frozen=True)
class JobSkillRequirement:
    name: str
    required_level: int = 3
    is_required: bool = True


@dataclass(frozen=True)
class CandidateSkill:
    name: str
    proficiency: int = 3


@dataclass
class CandidatePreferences:
    work_locations: List[str] = field(default_factory=list)
    preferred_locations: List[str] = field(default_factory=list)
    open_to_relocation: bool = False
    salary_min: Optional[int] = None
    salary_max: Optional[int] = None


@dataclass
class JobSnapshot:
    """The job side of a match, detached from the ORM."""

    job_id: str
    skills: List[JobSkillRequirement] = field(default_factory=list)
    primary_llms: List[str] = field(default_factory=list)
    frameworks: List[str] = field(default_factory=list)
    programming_languages: List[str] = field(default_factory=list)
    experience_level: Optional[str] = None
    work_location: Optional[str] = None
    location: Optional[str] = None
    salary_min: Optional[int] = None
    salary_max: Optional[int] = None
    company_benefits: List[str] = field(default_factory=list)


@dataclass
class CandidateSnapshot:
    """The candidate side of a match, detached from the ORM."""

    user_id: str
    skills: List[CandidateSkill] = field(default_factory=list)
    models: List[str] = field(default_factory=list)
    frameworks: List[str] = field(default_factory=list)
    languages: List[str] = field(default_factory=list)
    years_experience: Optional[int] = None
    preferences: Optional[CandidatePreferences] = None


@dataclass
class MatchScore:
    score: int
    breakdown: Dict[str, int]
    explanation: List[str]

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "MatchScore":
        return cls(score=data["score"], breakdown=dict(data["breakdown"]), explanation=list(data["explanation"]))


def _round(value: float) -> int:
    """Round half up, so 62.5 becomes 63."""
    return math.floor(value + 0.5)


def _lower_set(values: Iterable[str]) -> set[str]:
    return {value.strip().lower() for value in values if value and value.strip()}


def jaccard(a: Iterable[str], b: Iterable[str]) -> float:
    """Jaccard similarity of two case-insensitive sets. Two empty sets are identical."""
    left, right = _lower_set(a), _lower_set(b)
    if not left and not right:
        return 1.0
    if not left or not right:
        return 0.0
    return len(left & right) / len(left | right)


# ----------------------------------------------------------------------
# Factor scores
# ----------------------------------------------------------------------


def score_skills(job: JobSnapshot, candidate: CandidateSnapshot) -> float:
    if not job.skills:
        return 100.0
    if not candidate.skills:
        return 0.0

    proficiency = {skill.name.strip().lower(): skill.proficiency for skill in candidate.skills}
    total = 0.0
    matched = 0.0
    for requirement in job.skills:
        weight = 2.0 if requirement.is_required else 1.0
        total += weight
        level = proficiency.get(requirement.name.strip().lower())
        if level is not None:
            required_level = max(requirement.required_level, 1)
            matched += weight * min(level / required_level, 1.0)
    return matched / total * 100


def score_tech_stack(job: JobSnapshot, candidate: CandidateSnapshot) -> float:
    similarity = (
        jaccard(job.primary_llms, candidate.models) * TECH_STACK_WEIGHTS["models"]
        + jaccard(job.frameworks, candidate.frameworks) * TECH_STACK_WEIGHTS["frameworks"]
        + jaccard(job.programming_languages, candidate.languages) * TECH_STACK_WEIGHTS["languages"]
    )
    return similarity * 100


def score_experience(job: JobSnapshot, candidate: CandidateSnapshot) -> float:
    years_range = EXPERIENCE_RANGES.get((job.experience_level or "").lower())
    if years_range is None:
        return NEUTRAL_SCORE

    low, high = years_range
    years = candidate.years_experience or 0
    if low <= years <= high:
        return 100.0
    distance = low - years if years < low else years - high
    return max(100 - min(distance * 15, 75), 0)


def score_location(job: JobSnapshot, candidate: CandidateSnapshot) -> float:
    prefs = candidate.preferences
    if prefs is None:
        return NEUTRAL_SCORE

    accepted = _lower_set(prefs.work_locations)
    arrangement = (job.work_location or "").lower()

    if arrangement == "remote":
        return 100.0 if "remote" in accepted else 80.0

    if arrangement == "hybrid":
        if "hybrid" in accepted or "remote" in accepted:
            return 90.0
        if "onsite" in accepted:
            return 70.0
        return NEUTRAL_SCORE

    if arrangement == "onsite":
        if "onsite" not in accepted and not prefs.open_to_relocation:
            return 20.0
        job_location = (job.location or "").strip().lower()
        if job_location:
            for preferred in _lower_set(prefs.preferred_locations):
                if preferred in job_location or job_location in preferred:
                    return 100.0
        if prefs.open_to_relocation:
            return 60.0
        return 30.0

    return NEUTRAL_SCORE


def _band_average(low: Optional[int], high: Optional[int]) -> Optional[float]:
    if low and high:
        return (low + high) / 2
    if low:
        return float(low)
    if high:
        return float(high)
    return None


def score_salary(job: JobSnapshot, candidate: CandidateSnapshot) -> float:
    prefs = candidate.preferences
    if prefs is None:
        return NEUTRAL_SCORE

    job_average = _band_average(job.salary_min, job.salary_max)
    expected_average = _band_average(prefs.salary_min, prefs.salary_max)
    if job_average is None or not expected_average:
        return NEUTRAL_SCORE

    if job_average >= expected_average:
        return 100.0

    shortfall_pct = (expected_average - job_average) / expected_average * 100
    if shortfall_pct <= 10:
        return 90.0
    if shortfall_pct <= 20:
        return 70.0
    if shortfall_pct <= 30:
        return 50.0
    return max(30 - shortfall_pct, 0)


def score_cultural_fit(job: JobSnapshot, candidate: CandidateSnapshot) -> float:
    if not job.company_benefits:
        return NEUTRAL_SCORE
    benefits = [benefit.lower() for benefit in job.company_benefits]
    matched = sum(1 for valued in VALUED_BENEFITS if any(valued in benefit for benefit in benefits))
    return matched / len(VALUED_BENEFITS) * 100


# ----------------------------------------------------------------------
# Reasons
# ----------------------------------------------------------------------


def _skills_reason(score: float, job: JobSnapshot, candidate: CandidateSnapshot) -> str:
    owned = _lower_set(skill.name for skill in candidate.skills)
    matched = sum(1 for requirement in job.skills if requirement.name.strip().lower() in owned)
    total = len(job.skills)
    if score >= 80:
        return f"Strong skills match: {matched}/{total} required skills"
    if score >= 60:
        return f"Good skills match: {matched}/{total} skills matched"
    if score >= 40:
        return f"Moderate skills match: {matched}/{total} skills matched"
    return f"Limited skills match: {matched}/{total} skills matched"


def _tech_stack_reason(score: float, job: JobSnapshot, candidate: CandidateSnapshot) -> str:
    owned = _lower_set(candidate.models)
    matched = [model for model in job.primary_llms if model.strip().lower() in owned]
    if score >= 80:
        return f"Excellent tech stack alignment with {len(matched)} matching LLMs"
    if score >= 60:
        return f"Good tech stack match: experience with {', '.join(matched)}"
    if score >= 40:
        return f"Some tech stack overlap: {len(matched)} matching technologies"
    return "Limited tech stack alignment with required tools"


def _experience_reason(score: float, job: JobSnapshot, candidate: CandidateSnapshot) -> str:
    years = candidate.years_experience or 0
    level = job.experience_level
    if score >= 90:
        return f"Perfect experience match for {level} level ({years} years)"
    if score >= 70:
        return f"Good experience fit: {years} years for {level} role"
    if score >= 50:
        return f"Acceptable experience level: {years} years experience"
    return f"Experience level may not align with {level} requirements"


def _location_reason(score: float, job: JobSnapshot, candidate: CandidateSnapshot) -> str:
    arrangement = job.work_location
    if score >= 90:
        return f"Ideal {arrangement} work arrangement matches your preference"
    if score >= 70:
        return f"Compatible {arrangement} work location"
    if score >= 50:
        return f"{arrangement} work location is workable"
    return f"{arrangement} arrangement may not match your preference"


def _salary_reason(score: float, job: JobSnapshot, candidate: CandidateSnapshot) -> str:
    if score >= 90:
        return "Salary range meets or exceeds your expectations"
    if score >= 70:
        return "Competitive salary within your expected range"
    if score >= 50:
        return "Salary is close to your expectations"
    return "Salary may be below your expectations"


def _cultural_fit_reason(score: float, job: JobSnapshot, candidate: CandidateSnapshot) -> str:
    if score >= 80:
        return f"Strong cultural fit with {len(job.company_benefits)} matching benefits"
    if score >= 60:
        return "Good cultural alignment with company values"
    if score >= 40:
        return "Some cultural fit indicators present"
    return "Limited cultural fit information available"


_FACTORS = (
    ("skills", score_skills, _skills_reason),
    ("tech_stack", score_tech_stack, _tech_stack_reason),
    ("experience", score_experience, _experience_reason),
    ("location", score_location, _location_reason),
    ("salary", score_salary, _salary_reason),
    ("cultural_fit", score_cultural_fit, _cultural_fit_reason),
)


def calculate_match(job: JobSnapshot, candidate: CandidateSnapshot) -> MatchScore:
    """Score a candidate against a job.

    The explanation lists the reasons of the three factors contributing the
    most to the weighted total, highest first. Ties keep factor order.
    """
    total = 0.0
    breakdown: Dict[str, int] = {}
    contributions = []
    for name, scorer, reason in _FACTORS:
        value = scorer(job, candidate)
        contribution = value * WEIGHTS[name]
        total += contribution
        breakdown[name] = _round(value)
        contributions.append((contribution, reason(value, job, candidate)))

    top = sorted(contributions, key=lambda item: item[0], reverse=True)[:3]
    score = min(max(_round(total), 0), 100)
    return MatchScore(score=score, breakdown=breakdown, explanation=[text for _, text in top])
