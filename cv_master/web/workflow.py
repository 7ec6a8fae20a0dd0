"""Workflow routes - upload, profile, analysis, optimization, export."""

from fastapi import APIRouter, BackgroundTasks, File, Request, UploadFile
from fastapi.responses import JSONResponse, PlainTextResponse, RedirectResponse

from cv_master.errors import EncodingError
from cv_master.export.plain_text import EXPORT_FILENAME, render_plain_text
from cv_master.profile.models import SeniorityLevel
from cv_master.workflow.state import Step

from .dependencies import get_controller, toggle_theme
from .presentation import step_indicator

router = APIRouter()


def _home() -> RedirectResponse:
    return RedirectResponse("/", status_code=303)


def _render_step(request: Request, controller, form: dict | None = None, status_code: int = 200):
    state = controller.state
    return request.app.state.templates.TemplateResponse("index.html", {
        "request": request,
        "state": state,
        "step": state.step.value,
        "indicator": step_indicator(state.step),
        "levels": list(SeniorityLevel),
        "form": form or {},
        "poll_interval": request.app.state.config.web.poll_interval_seconds,
    }, status_code=status_code)


@router.get("/")
def index(request: Request):
    controller = get_controller(request)
    return _render_step(request, controller)


@router.get("/status")
def status(request: Request):
    state = get_controller(request).state
    return JSONResponse({"step": state.step.value, "error": state.error})


@router.post("/upload")
async def upload(request: Request, file: UploadFile = File(...)):
    controller = get_controller(request)
    if controller.state.step is not Step.UPLOAD:
        return _home()

    try:
        data = await file.read()
    except OSError as e:
        controller.fail_upload(EncodingError(str(e)))
        return _home()

    controller.submit_file(file.filename or "", file.content_type or "", data)
    return _home()


@router.post("/profile")
async def submit_profile(request: Request, background_tasks: BackgroundTasks):
    controller = get_controller(request)
    if controller.state.step is not Step.PROFILE:
        return _home()

    form = await request.form()
    fields = {
        "job_title": form.get("job_title", ""),
        "industry": form.get("industry", ""),
        "level": form.get("level", ""),
        "keywords": form.get("keywords", ""),
    }
    profile = controller.submit_profile(**fields)
    if profile is None:
        # Incomplete form: show it again with what was entered
        return _render_step(request, controller, form=fields)

    background_tasks.add_task(controller.analyze)
    return _home()


@router.post("/optimize")
def optimize(request: Request, background_tasks: BackgroundTasks):
    controller = get_controller(request)
    if controller.state.step is not Step.RESULTS:
        return _home()

    controller.request_optimization()
    background_tasks.add_task(controller.optimize)
    return _home()


@router.post("/restart")
def restart(request: Request):
    get_controller(request).restart()
    return _home()


@router.post("/dismiss-error")
def dismiss_error(request: Request):
    get_controller(request).dismiss_error()
    return _home()


@router.post("/theme")
def theme(request: Request):
    toggle_theme(request)
    return _home()


@router.get("/export.txt")
def export_text(request: Request):
    optimized = get_controller(request).state.optimized
    if optimized is None:
        return _home()
    return PlainTextResponse(
        render_plain_text(optimized),
        headers={"Content-Disposition": f'attachment; filename="{EXPORT_FILENAME}"'},
    )


@router.get("/print")
def print_view(request: Request):
    optimized = get_controller(request).state.optimized
    if optimized is None:
        return _home()
    return request.app.state.templates.TemplateResponse("print.html", {
        "request": request,
        "resume": optimized.structured_content,
    })
