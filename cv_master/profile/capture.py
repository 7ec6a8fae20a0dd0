"""Profile form capture."""

import logging
from typing import Optional, Union

from cv_master.profile.models import SeniorityLevel, TargetProfile

logger = logging.getLogger("cv_master.profile")


def parse_level(value: Union[str, SeniorityLevel, None]) -> Optional[SeniorityLevel]:
    """Map a form value to a level; blank means the Mid default, unknown is None."""
    if isinstance(value, SeniorityLevel):
        return value
    value = (value or "").strip()
    if not value:
        return SeniorityLevel.MID
    for level in SeniorityLevel:
        if value.lower() in (level.value.lower(), level.name.lower()):
            return level
    return None


def capture_profile(
    job_title: Optional[str],
    industry: Optional[str],
    level: Union[str, SeniorityLevel, None] = None,
    keywords: Optional[str] = "",
) -> Optional[TargetProfile]:
    """Build a frozen profile from form fields, or None if the form is incomplete."""
    job_title = (job_title or "").strip()
    industry = (industry or "").strip()
    if not job_title or not industry:
        return None

    parsed_level = parse_level(level)
    if parsed_level is None:
        logger.debug("Rejected profile with unknown level %r", level)
        return None

    return TargetProfile(
        job_title=job_title,
        industry=industry,
        level=parsed_level,
        keywords=(keywords or "").strip(),
    )
