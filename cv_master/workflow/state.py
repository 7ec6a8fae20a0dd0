"""Session state for one upload-through-optimize workflow."""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from cv_master.gateway.schemas import AnalysisResult, OptimizedDocument
from cv_master.intake.models import UploadedDocument
from cv_master.profile.models import TargetProfile


class Step(str, Enum):
    UPLOAD = "upload"
    PROFILE = "profile"
    ANALYZING = "analyzing"
    RESULTS = "results"
    OPTIMIZING = "optimizing"
    DONE = "done"

    @property
    def is_busy(self) -> bool:
        return self in (Step.ANALYZING, Step.OPTIMIZING)


@dataclass
class SessionState:
    step: Step = Step.UPLOAD
    document: Optional[UploadedDocument] = None
    profile: Optional[TargetProfile] = None
    analysis: Optional[AnalysisResult] = None
    optimized: Optional[OptimizedDocument] = None
    error: Optional[str] = None
    generation: int = 0  # bumped on restart; late responses from older generations are dropped

    def reset(self) -> None:
        self.step = Step.UPLOAD
        self.document = None
        self.profile = None
        self.analysis = None
        self.optimized = None
        self.error = None
        self.generation += 1
