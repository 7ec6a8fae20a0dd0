"""Shared fixtures: sample service payloads and a deterministic gateway stub."""

import copy
import json

import pytest

from cv_master.errors import EmptyResponseError
from cv_master.gateway.client import InferenceGateway
from cv_master.gateway.schemas import AnalysisResult, OptimizedDocument, StructuredResume

PDF_BYTES = b"%PDF-1.4\n1 0 obj << /Type /Catalog >> endobj\ntrailer << /Root 1 0 R >>\n%%EOF\n"


def _section(status="good", score=80, feedback=None):
    return {"status": status, "score": score, "feedback": feedback or ["Looks fine"]}


ANALYSIS_PAYLOAD = {
    "overallScore": 72,
    "summary": "Solid backend profile with a few gaps in keywords.",
    "contactInfo": _section("good", 95, ["Email and phone present"]),
    "professionalSummary": _section("warning", 60, ["Summary is generic"]),
    "experience": _section("good", 78, ["Good use of action verbs"]),
    "education": _section("good", 85, ["Degree listed"]),
    "skills": _section("critical", 40, ["Skills section is missing cloud tools"]),
    "atsKeywords": {
        "found": ["Python", "PostgreSQL"],
        "missing": ["Kubernetes", "gRPC"],
        "densityScore": 55,
    },
    "formatting": {"isClean": True, "issues": []},
    "recommendations": ["Add a skills section with cloud tooling", "Quantify achievements"],
}

RESUME_PAYLOAD = {
    "fullName": "Jane Doe",
    "title": "Senior Backend Engineer",
    "contact": {
        "email": "jane@example.com",
        "phone": "+1 555 0100",
        "linkedin": "https://linkedin.com/in/janedoe",
        "location": "Berlin",
        "portfolio": None,
    },
    "professionalSummary": "Backend engineer with 7 years building distributed systems.",
    "skills": {
        "technical": ["Python", "Go"],
        "soft": ["Mentoring"],
        "tools": ["Kubernetes", "PostgreSQL"],
        "languages": ["English", "German"],
    },
    "experience": [{
        "company": "Acme",
        "position": "Backend Engineer",
        "location": "Berlin",
        "startDate": "2019",
        "endDate": "Present",
        "achievements": ["Cut API latency by 40% by introducing gRPC"],
    }],
    "education": [{
        "institution": "TU Berlin",
        "degree": "BSc Computer Science",
        "location": "Berlin",
        "year": "2016",
    }],
    "projects": None,
}


@pytest.fixture
def pdf_bytes():
    return PDF_BYTES


@pytest.fixture
def analysis_payload():
    return copy.deepcopy(ANALYSIS_PAYLOAD)


@pytest.fixture
def resume_payload():
    return copy.deepcopy(RESUME_PAYLOAD)


@pytest.fixture
def analysis():
    return AnalysisResult.model_validate_json(json.dumps(ANALYSIS_PAYLOAD))


@pytest.fixture
def optimized():
    return OptimizedDocument(structured_content=StructuredResume.model_validate_json(json.dumps(RESUME_PAYLOAD)))


class StubGateway(InferenceGateway):
    """Returns canned results or raises; can hold a call open until released."""

    def __init__(self, analysis=None, optimized=None, analyze_error=None, optimize_error=None):
        self.analysis = analysis
        self.optimized = optimized
        self.analyze_error = analyze_error
        self.optimize_error = optimize_error
        self.analyze_calls = []
        self.optimize_calls = []
        self.release = None  # asyncio.Event set by a test to let a held call finish

    async def _wait(self):
        if self.release is not None:
            await self.release.wait()

    async def analyze(self, document, profile):
        self.analyze_calls.append((document, profile))
        await self._wait()
        if self.analyze_error is not None:
            raise self.analyze_error
        if self.analysis is None:
            raise EmptyResponseError("stub has no analysis")
        return self.analysis

    async def optimize(self, document, profile, analysis):
        self.optimize_calls.append((document, profile, analysis))
        await self._wait()
        if self.optimize_error is not None:
            raise self.optimize_error
        if self.optimized is None:
            raise EmptyResponseError("stub has no optimized document")
        return self.optimized


@pytest.fixture
def stub_gateway(analysis, optimized):
    return StubGateway(analysis=analysis, optimized=optimized)
