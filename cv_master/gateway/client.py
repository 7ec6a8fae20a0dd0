"""Inference gateway: the boundary to the external analysis/rewriting service."""

import logging
from abc import ABC, abstractmethod
from typing import Any, Optional

from openai import AsyncOpenAI, OpenAIError

from cv_master.config import GatewayConfig
from cv_master.errors import EmptyResponseError, MissingCredentialsError, TransportError
from cv_master.gateway.prompts import build_analysis_prompt, build_optimization_prompt
from cv_master.gateway.schemas import (
    ANALYSIS_SCHEMA,
    OPTIMIZED_RESUME_SCHEMA,
    AnalysisResult,
    OptimizedDocument,
    StructuredResume,
    parse_response,
    response_format,
)
from cv_master.intake.models import UploadedDocument
from cv_master.profile.models import TargetProfile

logger = logging.getLogger("cv_master.gateway")


class InferenceGateway(ABC):
    """Two long-running, fallible operations with strictly typed results.

    Implementations make a single attempt and raise a GatewayError subclass on
    any failure; recovery is the caller's decision.
    """

    @abstractmethod
    async def analyze(self, document: UploadedDocument, profile: TargetProfile) -> AnalysisResult:
        ...

    @abstractmethod
    async def optimize(
        self,
        document: UploadedDocument,
        profile: TargetProfile,
        analysis: AnalysisResult,
    ) -> OptimizedDocument:
        ...


class OpenAIGateway(InferenceGateway):
    """Gateway backed by OpenAI Chat Completions with structured outputs.

    This class is the only holder of the API credential.
    """

    def __init__(self, config: GatewayConfig, client: Any = None):
        self.config = config
        self._client = client

    def _get_client(self):
        if self._client is not None:
            return self._client
        if not self.config.api_key:
            raise MissingCredentialsError("No OpenAI API key configured (set OPENAI_API_KEY)")

        self._client = AsyncOpenAI(
            api_key=self.config.api_key,
            timeout=self.config.timeout_seconds,
            max_retries=self.config.max_retries,
        )
        return self._client

    @staticmethod
    def _messages(document: UploadedDocument, prompt: str) -> list[dict]:
        return [{
            "role": "user",
            "content": [
                {
                    "type": "file",
                    "file": {"filename": document.filename, "file_data": document.to_data_url()},
                },
                {"type": "text", "text": prompt},
            ],
        }]

    async def _complete(
        self,
        document: UploadedDocument,
        prompt: str,
        schema_name: str,
        schema: dict,
        temperature: float,
    ) -> Optional[str]:
        client = self._get_client()

        try:
            response = await client.chat.completions.create(
                model=self.config.model,
                messages=self._messages(document, prompt),
                response_format=response_format(schema_name, schema),
                temperature=temperature,
            )
        except OpenAIError as e:
            raise TransportError(f"{schema_name} request failed: {type(e).__name__}: {e}") from e

        choice = response.choices[0] if response.choices else None
        if not choice or not choice.message:
            raise EmptyResponseError(f"{schema_name}: no choices returned")
        if getattr(choice.message, "refusal", None):
            raise EmptyResponseError(f"{schema_name}: request refused: {choice.message.refusal}")
        return choice.message.content

    async def analyze(self, document: UploadedDocument, profile: TargetProfile) -> AnalysisResult:
        logger.info(
            "Analyzing '%s' for %s (%s, %s)",
            document.filename, profile.job_title, profile.industry, profile.level.value,
        )
        text = await self._complete(
            document,
            build_analysis_prompt(profile, self.config.response_language),
            "analysis_result",
            ANALYSIS_SCHEMA,
            self.config.analyze_temperature,
        )
        result = parse_response(text, AnalysisResult)
        logger.info("Analysis complete: overall score %d", result.overall_score)
        return result

    async def optimize(
        self,
        document: UploadedDocument,
        profile: TargetProfile,
        analysis: AnalysisResult,
    ) -> OptimizedDocument:
        logger.info(
            "Optimizing '%s' for %s with %d missing keywords",
            document.filename, profile.job_title, len(analysis.ats_keywords.missing),
        )
        text = await self._complete(
            document,
            build_optimization_prompt(profile, analysis, self.config.response_language),
            "optimized_resume",
            OPTIMIZED_RESUME_SCHEMA,
            self.config.optimize_temperature,
        )
        resume = parse_response(text, StructuredResume)
        logger.info("Optimization complete: %d experience entries", len(resume.experience))
        return OptimizedDocument(structured_content=resume)
