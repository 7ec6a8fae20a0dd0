"""Target-role profile model."""

from dataclasses import dataclass
from enum import Enum


class SeniorityLevel(str, Enum):
    JUNIOR = "Junior"
    MID = "Mid"
    SENIOR = "Senior"
    EXECUTIVE = "Executive"

    @property
    def label(self) -> str:
        """Human description with the experience band, used in prompts."""
        return _LEVEL_LABELS[self]


_LEVEL_LABELS = {
    SeniorityLevel.JUNIOR: "Junior (0-2 years)",
    SeniorityLevel.MID: "Mid-level (3-5 years)",
    SeniorityLevel.SENIOR: "Senior (5-8 years)",
    SeniorityLevel.EXECUTIVE: "Executive (10+ years)",
}


@dataclass(frozen=True)
class TargetProfile:
    """The role a resume is assessed and rewritten for."""

    job_title: str
    industry: str
    level: SeniorityLevel = SeniorityLevel.MID
    keywords: str = ""  # empty: let the service infer keywords

    def to_summary_string(self) -> str:
        """Create a concise text summary for prompts and logs."""
        parts = [
            f"Target role: {self.job_title}",
            f"Industry: {self.industry}",
            f"Experience level: {self.level.label}",
        ]
        if self.keywords:
            parts.append(f"Target keywords: {self.keywords}")
        return "\n".join(parts)
