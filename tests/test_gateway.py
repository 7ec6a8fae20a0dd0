"""Tests for the OpenAI-backed inference gateway, with a fake SDK client."""

import asyncio
import json
from types import SimpleNamespace

import pytest
from openai import OpenAIError

from cv_master.config import GatewayConfig
from cv_master.errors import (
    EmptyResponseError,
    MissingCredentialsError,
    SchemaViolationError,
    TransportError,
)
from cv_master.gateway.client import OpenAIGateway
from cv_master.gateway.prompts import build_analysis_prompt, build_optimization_prompt
from cv_master.intake.document_intake import submit_file
from cv_master.profile.models import SeniorityLevel, TargetProfile


class FakeCompletions:
    def __init__(self, content=None, error=None, refusal=None, choices=True):
        self.content = content
        self.error = error
        self.refusal = refusal
        self.choices = choices
        self.calls = []

    async def create(self, **kwargs):
        self.calls.append(kwargs)
        if self.error is not None:
            raise self.error
        if not self.choices:
            return SimpleNamespace(choices=[])
        message = SimpleNamespace(content=self.content, refusal=self.refusal)
        return SimpleNamespace(choices=[SimpleNamespace(message=message)])


def make_gateway(completions, **config):
    client = SimpleNamespace(chat=SimpleNamespace(completions=completions))
    return OpenAIGateway(GatewayConfig(api_key="sk-test", **config), client=client)


@pytest.fixture
def document(pdf_bytes):
    return submit_file("resume.pdf", "application/pdf", pdf_bytes)


@pytest.fixture
def profile():
    return TargetProfile("Backend Engineer", "Tech", SeniorityLevel.SENIOR, "")


class TestAnalyze:
    def test_returns_typed_result(self, document, profile, analysis_payload):
        completions = FakeCompletions(content=json.dumps(analysis_payload))
        result = asyncio.run(make_gateway(completions).analyze(document, profile))
        assert result.overall_score == 72

    def test_request_shape(self, document, profile, analysis_payload):
        completions = FakeCompletions(content=json.dumps(analysis_payload))
        asyncio.run(make_gateway(completions, model="gpt-4o").analyze(document, profile))

        call = completions.calls[0]
        assert call["model"] == "gpt-4o"
        assert call["temperature"] == 0.2
        assert call["response_format"]["json_schema"]["name"] == "analysis_result"

        file_part, text_part = call["messages"][0]["content"]
        assert file_part["type"] == "file"
        assert file_part["file"]["file_data"] == f"data:application/pdf;base64,{document.payload}"
        assert text_part["type"] == "text"
        assert "Backend Engineer" in text_part["text"]

    def test_empty_content(self, document, profile):
        completions = FakeCompletions(content="")
        with pytest.raises(EmptyResponseError):
            asyncio.run(make_gateway(completions).analyze(document, profile))

    def test_no_choices(self, document, profile):
        completions = FakeCompletions(choices=False)
        with pytest.raises(EmptyResponseError):
            asyncio.run(make_gateway(completions).analyze(document, profile))

    def test_refusal(self, document, profile):
        completions = FakeCompletions(content=None, refusal="I can't help with that")
        with pytest.raises(EmptyResponseError, match="refused"):
            asyncio.run(make_gateway(completions).analyze(document, profile))

    def test_malformed_content(self, document, profile):
        completions = FakeCompletions(content='{"overallScore": 50}')
        with pytest.raises(SchemaViolationError):
            asyncio.run(make_gateway(completions).analyze(document, profile))

    def test_sdk_error_wrapped(self, document, profile):
        completions = FakeCompletions(error=OpenAIError("connection reset"))
        with pytest.raises(TransportError, match="connection reset"):
            asyncio.run(make_gateway(completions).analyze(document, profile))

    def test_single_attempt(self, document, profile):
        completions = FakeCompletions(error=OpenAIError("boom"))
        with pytest.raises(TransportError):
            asyncio.run(make_gateway(completions).analyze(document, profile))
        assert len(completions.calls) == 1

    def test_missing_credentials(self, document, profile):
        gateway = OpenAIGateway(GatewayConfig(api_key=""))
        with pytest.raises(MissingCredentialsError):
            asyncio.run(gateway.analyze(document, profile))


class TestOptimize:
    def test_returns_structured_content(self, document, profile, analysis, resume_payload):
        completions = FakeCompletions(content=json.dumps(resume_payload))
        result = asyncio.run(make_gateway(completions).optimize(document, profile, analysis))
        assert result.structured_content.full_name == "Jane Doe"

    def test_request_uses_higher_temperature(self, document, profile, analysis, resume_payload):
        completions = FakeCompletions(content=json.dumps(resume_payload))
        asyncio.run(make_gateway(completions).optimize(document, profile, analysis))
        call = completions.calls[0]
        assert call["temperature"] == 0.4
        assert call["response_format"]["json_schema"]["name"] == "optimized_resume"

    def test_missing_keywords_in_prompt(self, document, profile, analysis, resume_payload):
        completions = FakeCompletions(content=json.dumps(resume_payload))
        asyncio.run(make_gateway(completions).optimize(document, profile, analysis))
        prompt = completions.calls[0]["messages"][0]["content"][1]["text"]
        assert "Kubernetes, gRPC" in prompt

    def test_malformed_content(self, document, profile, analysis):
        completions = FakeCompletions(content="[]")
        with pytest.raises(SchemaViolationError):
            asyncio.run(make_gateway(completions).optimize(document, profile, analysis))


class TestPrompts:
    def test_analysis_prompt_embeds_profile(self):
        profile = TargetProfile("Data Analyst", "Finance", SeniorityLevel.JUNIOR, "SQL, Tableau")
        prompt = build_analysis_prompt(profile)
        assert "Data Analyst" in prompt
        assert "Finance" in prompt
        assert "Junior (0-2 years)" in prompt
        assert "SQL, Tableau" in prompt
        for criterion in ("formatting", "action verbs", "Keywords", "Structure"):
            assert criterion in prompt

    def test_empty_keywords_ask_for_inference(self, profile):
        assert "infer the keywords" in build_analysis_prompt(profile)

    def test_response_language(self, profile):
        assert "Write every text value in Spanish" in build_analysis_prompt(profile, "Spanish")

    def test_optimization_prompt_tailors_level(self, profile, analysis):
        prompt = build_optimization_prompt(profile, analysis)
        assert "Senior (5-8 years)" in prompt
        assert "projects to null" in prompt
