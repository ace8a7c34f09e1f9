from fastapi import APIRouter, Depends, Form, Request
from fastapi.responses import HTMLResponse, RedirectResponse

from .controller import Trainer
from .globals import templates
from .models import (
    AnswerRequest,
    ConfigUpdate,
    Direction,
    QuizConfig,
    SessionType,
    StartRequest,
    TrainerView,
    WordRange,
)

# Handlers are plain `def`: the Trainer writes to sqlite, so FastAPI runs
# them in its threadpool and the Trainer's lock serializes them.
router = APIRouter()


# --- Dependencies ---
def get_trainer(request: Request) -> Trainer:
    return request.app.state.trainer


def back_home(request: Request) -> RedirectResponse:
    return RedirectResponse(url=str(request.url_for("home")), status_code=302)


# --- Pages ---
@router.get("/", response_class=HTMLResponse)
def home(request: Request, trainer: Trainer = Depends(get_trainer)):
    return templates.TemplateResponse(
        request,
        "index.html",
        {"view": trainer.view(), "directions": list(Direction)},
    )


@router.post("/start", response_class=RedirectResponse)
def start_form(
    request: Request,
    session_type: SessionType = Form(SessionType.NORMAL),
    trainer: Trainer = Depends(get_trainer),
):
    trainer.start(session_type)
    return back_home(request)


@router.post("/answer", response_class=RedirectResponse)
def answer_form(
    request: Request, answer: str = Form(...), trainer: Trainer = Depends(get_trainer)
):
    trainer.answer(answer)
    return back_home(request)


@router.post("/next", response_class=RedirectResponse)
def next_form(request: Request, trainer: Trainer = Depends(get_trainer)):
    trainer.advance()
    return back_home(request)


@router.post("/lobby", response_class=RedirectResponse)
def lobby_form(request: Request, trainer: Trainer = Depends(get_trainer)):
    trainer.back_to_lobby()
    return back_home(request)


@router.post("/settings", response_class=RedirectResponse)
def settings_form(
    request: Request,
    direction: Direction = Form(...),
    start: int = Form(...),
    end: int = Form(...),
    limit: int = Form(..., ge=1),
    trainer: Trainer = Depends(get_trainer),
):
    trainer.update_config(
        ConfigUpdate(direction=direction, word_range=WordRange(start=start, end=end), limit=limit)
    )
    return back_home(request)


@router.post("/reset", response_class=RedirectResponse)
def reset_form(
    request: Request, confirm: bool = Form(False), trainer: Trainer = Depends(get_trainer)
):
    if confirm:
        trainer.reset_progress()
    return back_home(request)


# --- JSON API ---
@router.get("/api/state", response_model=TrainerView)
def get_state(trainer: Trainer = Depends(get_trainer)):
    return trainer.view()


@router.post("/api/session/start", response_model=TrainerView)
def start_session(body: StartRequest, trainer: Trainer = Depends(get_trainer)):
    trainer.start(body.session_type)
    return trainer.view()


@router.post("/api/session/answer", response_model=TrainerView)
def submit_answer(body: AnswerRequest, trainer: Trainer = Depends(get_trainer)):
    trainer.answer(body.answer)
    return trainer.view()


@router.post("/api/session/next", response_model=TrainerView)
def advance(trainer: Trainer = Depends(get_trainer)):
    trainer.advance()
    return trainer.view()


@router.post("/api/session/lobby", response_model=TrainerView)
def back_to_lobby(trainer: Trainer = Depends(get_trainer)):
    trainer.back_to_lobby()
    return trainer.view()


@router.get("/api/settings", response_model=QuizConfig)
def get_settings(trainer: Trainer = Depends(get_trainer)):
    return trainer.config


@router.put("/api/settings", response_model=QuizConfig)
def update_settings(body: ConfigUpdate, trainer: Trainer = Depends(get_trainer)):
    return trainer.update_config(body)


@router.post("/api/reset", response_model=TrainerView)
def reset_progress(trainer: Trainer = Depends(get_trainer)):
    trainer.reset_progress()
    return trainer.view()
