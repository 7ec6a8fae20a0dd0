"""View helpers for the step indicator and score colouring."""

from cv_master.workflow.state import Step

INDICATOR_STEPS = (
    (Step.UPLOAD, "Upload CV"),
    (Step.PROFILE, "Profile"),
    (Step.RESULTS, "Analysis"),
    (Step.DONE, "Optimized"),
)

_STEP_ORDER = list(Step)

# Loading steps are shown as the stage they lead to
_DISPLAY_STEP = {
    Step.ANALYZING: Step.RESULTS,
    Step.OPTIMIZING: Step.DONE,
}


def step_status(indicator_step: Step, current: Step) -> str:
    effective = _DISPLAY_STEP.get(current, current)
    current_index = _STEP_ORDER.index(effective)
    step_index = _STEP_ORDER.index(indicator_step)
    if step_index < current_index:
        return "completed"
    if step_index == current_index:
        return "current"
    return "pending"


def step_indicator(current: Step) -> list[dict]:
    return [
        {"step": step.value, "label": label, "status": step_status(step, current)}
        for step, label in INDICATOR_STEPS
    ]


def score_band(score: int) -> str:
    if score > 75:
        return "good"
    if score > 50:
        return "warning"
    return "critical"
