"""Workflow controller: upload -> profile -> analyze -> results -> optimize -> done.

The controller exclusively owns a SessionState. Every transition goes through
``_enter``, which refuses to reach a step whose prerequisites are missing.
Gateway calls are awaited with the session generation captured beforehand, so
that a response arriving after ``restart`` is dropped instead of being written
into the fresh session.
"""

import logging
from typing import Optional, Union

from cv_master.errors import GatewayError, IntakeError, WorkflowContractError
from cv_master.gateway.client import InferenceGateway
from cv_master.gateway.schemas import AnalysisResult, OptimizedDocument
from cv_master.intake.document_intake import DEFAULT_MAX_BYTES, submit_file
from cv_master.intake.models import UploadedDocument
from cv_master.profile.capture import capture_profile
from cv_master.profile.models import SeniorityLevel, TargetProfile
from cv_master.workflow.state import SessionState, Step

logger = logging.getLogger("cv_master.workflow")

ANALYSIS_FAILED_MESSAGE = (
    "The resume could not be analyzed. Make sure a valid API key is configured "
    "and the file is readable, then try again."
)
OPTIMIZATION_FAILED_MESSAGE = "The optimized resume could not be generated. Please try again."


class WorkflowController:
    def __init__(
        self,
        gateway: InferenceGateway,
        state: Optional[SessionState] = None,
        max_upload_bytes: int = DEFAULT_MAX_BYTES,
        session_id: str = "",
    ):
        self.gateway = gateway
        self.state = state if state is not None else SessionState()
        self.max_upload_bytes = max_upload_bytes
        self.session_id = session_id
        self._in_flight: Optional[int] = None

    # Transitions

    def _require_step(self, expected: Step, action: str) -> None:
        if self.state.step is not expected:
            raise WorkflowContractError(
                f"{action} is only valid in step '{expected.value}', not '{self.state.step.value}'"
            )

    def _enter(self, step: Step) -> None:
        s = self.state
        missing = []
        if step in (Step.PROFILE, Step.ANALYZING, Step.RESULTS, Step.OPTIMIZING, Step.DONE) and s.document is None:
            missing.append("document")
        if step in (Step.ANALYZING, Step.RESULTS, Step.OPTIMIZING, Step.DONE) and s.profile is None:
            missing.append("profile")
        if step in (Step.RESULTS, Step.OPTIMIZING, Step.DONE) and s.analysis is None:
            missing.append("analysis")
        if step is Step.DONE and s.optimized is None:
            missing.append("optimized document")
        if missing:
            raise WorkflowContractError(f"Cannot enter '{step.value}' without: {', '.join(missing)}")

        logger.debug("[session:%s] %s -> %s", self.session_id, s.step.value, step.value)
        s.step = step
        s.error = None

    def _is_stale(self, generation: int, operation: str) -> bool:
        if generation != self.state.generation:
            logger.info(
                "[session:%s] Discarding %s response from generation %d (current %d)",
                self.session_id, operation, generation, self.state.generation,
            )
            return True
        return False

    def _begin_call(self, operation: str) -> int:
        generation = self.state.generation
        if self._in_flight == generation:
            raise WorkflowContractError(f"{operation} issued while another request is outstanding")
        self._in_flight = generation
        return generation

    def _end_call(self, generation: int) -> None:
        if self._in_flight == generation:
            self._in_flight = None

    # Document intake

    def submit_file(
        self,
        filename: str,
        content_type: str,
        data: Union[bytes, str],
    ) -> Optional[UploadedDocument]:
        """Validate and store an upload. On rejection the error message is set."""
        self._require_step(Step.UPLOAD, "submit_file")
        try:
            document = submit_file(filename, content_type, data, self.max_upload_bytes)
        except IntakeError as e:
            logger.info("[session:%s] Upload rejected (%s): %s", self.session_id, type(e).__name__, e)
            self.state.error = str(e)
            return None

        self.state.document = document
        self._enter(Step.PROFILE)
        return document

    def fail_upload(self, error: IntakeError) -> None:
        """Record an intake failure that happened before validation (e.g. a broken stream)."""
        self._require_step(Step.UPLOAD, "fail_upload")
        logger.info("[session:%s] Upload failed (%s): %s", self.session_id, type(error).__name__, error)
        self.state.error = str(error)

    # Profile capture and analysis

    def submit_profile(
        self,
        job_title: str,
        industry: str,
        level: Union[str, SeniorityLevel, None] = None,
        keywords: str = "",
    ) -> Optional[TargetProfile]:
        """Accept the profile and move to ANALYZING, or return None with no state change."""
        self._require_step(Step.PROFILE, "submit_profile")
        profile = capture_profile(job_title, industry, level, keywords)
        if profile is None:
            return None

        self.state.profile = profile
        self._enter(Step.ANALYZING)
        logger.info("[session:%s] Profile accepted:\n%s", self.session_id, profile.to_summary_string())
        return profile

    async def analyze(self) -> Optional[AnalysisResult]:
        """Run the analysis for the current session.

        Returns the result, or None if the call failed (step reverts to
        PROFILE with an error) or the session was restarted meanwhile.
        """
        self._require_step(Step.ANALYZING, "analyze")
        if self.state.document is None or self.state.profile is None:
            raise WorkflowContractError("analyze requires a document and a profile")

        document, profile = self.state.document, self.state.profile
        generation = self._begin_call("analyze")
        try:
            result = await self.gateway.analyze(document, profile)
        except GatewayError as e:
            if self._is_stale(generation, "analysis"):
                return None
            logger.warning("[session:%s] Analysis failed (%s): %s", self.session_id, type(e).__name__, e)
            self._enter(Step.PROFILE)
            self.state.error = ANALYSIS_FAILED_MESSAGE
            return None
        except Exception:
            if self._is_stale(generation, "analysis"):
                return None
            logger.exception("[session:%s] Analysis crashed", self.session_id)
            self._enter(Step.PROFILE)
            self.state.error = ANALYSIS_FAILED_MESSAGE
            return None
        finally:
            self._end_call(generation)

        if self._is_stale(generation, "analysis"):
            return None

        self.state.analysis = result
        self._enter(Step.RESULTS)
        return result

    async def run_profile(
        self,
        job_title: str,
        industry: str,
        level: Union[str, SeniorityLevel, None] = None,
        keywords: str = "",
    ) -> Optional[AnalysisResult]:
        if self.submit_profile(job_title, industry, level, keywords) is None:
            return None
        return await self.analyze()

    # Optimization

    def request_optimization(self) -> None:
        self._require_step(Step.RESULTS, "request_optimization")
        self._enter(Step.OPTIMIZING)

    async def optimize(self) -> Optional[OptimizedDocument]:
        """Run the rewrite. On failure the step reverts to RESULTS, keeping the analysis."""
        self._require_step(Step.OPTIMIZING, "optimize")
        s = self.state
        if s.document is None or s.profile is None or s.analysis is None:
            raise WorkflowContractError("optimize requires a document, a profile and an analysis")

        document, profile, analysis = s.document, s.profile, s.analysis
        generation = self._begin_call("optimize")
        try:
            optimized = await self.gateway.optimize(document, profile, analysis)
        except GatewayError as e:
            if self._is_stale(generation, "optimization"):
                return None
            logger.warning("[session:%s] Optimization failed (%s): %s", self.session_id, type(e).__name__, e)
            self._enter(Step.RESULTS)
            self.state.error = OPTIMIZATION_FAILED_MESSAGE
            return None
        except Exception:
            if self._is_stale(generation, "optimization"):
                return None
            logger.exception("[session:%s] Optimization crashed", self.session_id)
            self._enter(Step.RESULTS)
            self.state.error = OPTIMIZATION_FAILED_MESSAGE
            return None
        finally:
            self._end_call(generation)

        if self._is_stale(generation, "optimization"):
            return None

        self.state.optimized = optimized
        self._enter(Step.DONE)
        return optimized

    async def run_optimization(self) -> Optional[OptimizedDocument]:
        self.request_optimization()
        return await self.optimize()

    # Session

    def restart(self) -> None:
        logger.info("[session:%s] Restart from step '%s'", self.session_id, self.state.step.value)
        self.state.reset()

    def dismiss_error(self) -> None:
        self.state.error = None
