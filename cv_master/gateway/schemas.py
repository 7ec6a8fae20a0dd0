"""Typed results of the analysis service and the JSON schemas declared for them.

The pydantic models validate what comes back; the plain-dict schemas are sent
with each request so the service is constrained to the same shape. Wire names
are camelCase, Python attributes snake_case.
"""

import re
from typing import Annotated, Literal, Optional, Type, TypeVar

from pydantic import BaseModel, ConfigDict, Field, ValidationError
from pydantic.alias_generators import to_camel

from cv_master.errors import EmptyResponseError, SchemaViolationError

SectionStatus = Literal["good", "warning", "critical"]

Score = Annotated[int, Field(ge=0, le=100)]


class _WireModel(BaseModel):
    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
        strict=True,
    )


class SectionAssessment(_WireModel):
    status: SectionStatus
    score: Score
    feedback: list[str]


class KeywordGap(_WireModel):
    found: list[str]
    missing: list[str]
    density_score: Score


class FormattingReport(_WireModel):
    is_clean: bool
    issues: list[str]


class AnalysisResult(_WireModel):
    overall_score: Score
    summary: str
    contact_info: SectionAssessment
    professional_summary: SectionAssessment
    experience: SectionAssessment
    education: SectionAssessment
    skills: SectionAssessment
    ats_keywords: KeywordGap
    formatting: FormattingReport
    recommendations: list[str]

    def sections(self) -> list[tuple[str, SectionAssessment]]:
        """Section assessments in display order."""
        return [
            ("Contact Information", self.contact_info),
            ("Professional Summary", self.professional_summary),
            ("Experience", self.experience),
            ("Education", self.education),
            ("Skills", self.skills),
        ]


class ContactBlock(_WireModel):
    email: str
    phone: str
    linkedin: Optional[str] = None
    location: str
    portfolio: Optional[str] = None


class SkillSet(_WireModel):
    technical: list[str]
    soft: list[str]
    tools: list[str]
    languages: list[str]


class ExperienceEntry(_WireModel):
    company: str
    position: str
    location: str
    start_date: str
    end_date: str
    achievements: list[str]


class EducationEntry(_WireModel):
    institution: str
    degree: str
    location: str
    year: str


class ProjectEntry(_WireModel):
    name: str
    description: str
    technologies: str


class StructuredResume(_WireModel):
    full_name: str
    title: str
    contact: ContactBlock
    professional_summary: str
    skills: SkillSet
    experience: list[ExperienceEntry]
    education: list[EducationEntry]
    projects: Optional[list[ProjectEntry]] = None


class OptimizedDocument(_WireModel):
    structured_content: StructuredResume


# Response-shape declarations. Strict mode needs every property listed as
# required and no additional properties; optional values are nullable.


def _string(description: str = "") -> dict:
    schema = {"type": "string"}
    if description:
        schema["description"] = description
    return schema


def _nullable_string() -> dict:
    return {"type": ["string", "null"]}


def _integer(description: str = "") -> dict:
    schema = {"type": "integer"}
    if description:
        schema["description"] = description
    return schema


def _string_list(description: str = "") -> dict:
    schema = {"type": "array", "items": {"type": "string"}}
    if description:
        schema["description"] = description
    return schema


def _object(properties: dict, description: str = "") -> dict:
    schema = {
        "type": "object",
        "properties": properties,
        "required": list(properties),
        "additionalProperties": False,
    }
    if description:
        schema["description"] = description
    return schema


def _section() -> dict:
    return _object({
        "status": {"type": "string", "enum": ["good", "warning", "critical"]},
        "score": _integer("Section score from 0 to 100"),
        "feedback": _string_list(),
    })


ANALYSIS_SCHEMA = _object({
    "overallScore": _integer("Overall ATS score from 0 to 100"),
    "summary": _string("Executive summary of the resume diagnosis"),
    "contactInfo": _section(),
    "professionalSummary": _section(),
    "experience": _section(),
    "education": _section(),
    "skills": _section(),
    "atsKeywords": _object({
        "found": _string_list(),
        "missing": _string_list(),
        "densityScore": _integer("Keyword density score from 0 to 100"),
    }),
    "formatting": _object({
        "isClean": {"type": "boolean"},
        "issues": _string_list(),
    }),
    "recommendations": _string_list("Concrete actions that improve the resume"),
})

OPTIMIZED_RESUME_SCHEMA = _object({
    "fullName": _string(),
    "title": _string("Professional headline optimized for the target role"),
    "contact": _object({
        "email": _string(),
        "phone": _string(),
        "linkedin": _nullable_string(),
        "location": _string(),
        "portfolio": _nullable_string(),
    }),
    "professionalSummary": _string("Optimized professional summary, 3-4 lines"),
    "skills": _object({
        "technical": _string_list(),
        "soft": _string_list(),
        "tools": _string_list(),
        "languages": _string_list(),
    }),
    "experience": {
        "type": "array",
        "items": _object({
            "company": _string(),
            "position": _string(),
            "location": _string(),
            "startDate": _string(),
            "endDate": _string(),
            "achievements": _string_list(
                "Quantified achievements and key responsibilities, each starting with an action verb"
            ),
        }),
    },
    "education": {
        "type": "array",
        "items": _object({
            "institution": _string(),
            "degree": _string(),
            "location": _string(),
            "year": _string(),
        }),
    },
    "projects": {
        "type": ["array", "null"],
        "items": _object({
            "name": _string(),
            "description": _string(),
            "technologies": _string(),
        }),
    },
})


def response_format(name: str, schema: dict) -> dict:
    """Wrap a schema as a Chat Completions ``response_format`` parameter."""
    return {
        "type": "json_schema",
        "json_schema": {"name": name, "strict": True, "schema": schema},
    }


ModelT = TypeVar("ModelT", bound=BaseModel)

_CODE_FENCE = re.compile(r"^```(?:json)?\s*|\s*```$")


def parse_response(text: Optional[str], model: Type[ModelT]) -> ModelT:
    """Parse service output into ``model``.

    Raises EmptyResponseError when there is no text and SchemaViolationError
    when the text is not JSON or does not fit the declared shape.
    """
    raw = (text or "").strip()
    if not raw:
        raise EmptyResponseError(f"No text returned for {model.__name__}")

    # Handle potential markdown code blocks
    if raw.startswith("```"):
        raw = _CODE_FENCE.sub("", raw)

    try:
        return model.model_validate_json(raw)
    except ValidationError as e:
        if any(err["type"] == "json_invalid" for err in e.errors()):
            raise SchemaViolationError(f"{model.__name__} response is not valid JSON: {e}") from e
        raise SchemaViolationError(
            f"{model.__name__} response does not match the declared schema: "
            f"{e.error_count()} error(s)\n{e}"
        ) from e
