"""Instruction prompts for the analysis and rewriting requests."""

from cv_master.gateway.schemas import AnalysisResult
from cv_master.profile.models import TargetProfile


def _keyword_hint(profile: TargetProfile) -> str:
    if profile.keywords:
        return profile.keywords
    return "(none given - infer the keywords an ATS would expect for this role and industry)"


def build_analysis_prompt(profile: TargetProfile, language: str = "English") -> str:
    return (
        "Act as an expert Applicant Tracking System (ATS) and a senior recruiter.\n\n"
        "Analyze the attached resume.\n\n"
        "CANDIDATE CONTEXT:\n"
        f"- Target role: {profile.job_title}\n"
        f"- Industry: {profile.industry}\n"
        f"- Experience level: {profile.level.label}\n"
        f"- Target keywords: {_keyword_hint(profile)}\n\n"
        "TASK:\n"
        "Evaluate the resume rigorously against standard ATS criteria:\n"
        "1. Readability and formatting (no complex tables, standard fonts).\n"
        "2. Content (action verbs, quantifiable achievements).\n"
        "3. Keywords (match with the target role).\n"
        "4. Structure (contact, summary, reverse-chronological experience, education, skills).\n\n"
        "Return a detailed analysis as JSON strictly following the provided schema.\n"
        f"Write every text value in {language}."
    )


def build_optimization_prompt(
    profile: TargetProfile,
    analysis: AnalysisResult,
    language: str = "English",
) -> str:
    missing = ", ".join(analysis.ats_keywords.missing) or "(none)"
    return (
        "You are a professional resume writer specialized in ATS optimization.\n\n"
        "RESTRUCTURE and REWRITE the attached resume to maximize its chances of passing "
        f'ATS filters for a "{profile.job_title}" position in {profile.industry}.\n\n'
        "REWRITING INSTRUCTIONS:\n"
        "1. Extract the information and structure it as strict JSON.\n"
        f"2. Incorporate these missing keywords: {missing}.\n"
        '3. Rewrite the experience "achievements" with strong action verbs (e.g. "Led", '
        '"Built", "Optimized") and focus on quantifiable results (figures, % improvement).\n'
        '4. Make the "professionalSummary" compelling and aligned with a '
        f"{profile.level.label} role.\n"
        "5. Fix spelling and grammar.\n"
        "6. Remove irrelevant information.\n"
        f"7. Write the entire result in {language}.\n\n"
        "IMPORTANT:\n"
        "- If the original resume has no projects, set projects to null; if it has "
        "significant projects, include them.\n"
        "- Split the skills into categories: technical, soft, tools and languages.\n\n"
        "Return ONLY the JSON object."
    )
