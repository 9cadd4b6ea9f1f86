"""FastAPI server hosting tutorial question sessions."""

from __future__ import annotations

from dataclasses import replace
from threading import Thread
from uuid import uuid4

from fastapi import Depends, FastAPI, HTTPException, Request, Response
from fastapi.responses import HTMLResponse
from markupsafe import Markup
from pydantic import BaseModel
import uvicorn

from tutorial_quiz.constants.about import APP_NAME, APP_VERSION
from tutorial_quiz.constants.network_constants import (
    DEFAULT_HOST,
    DEFAULT_PORT,
    SESSION_COOKIE,
    SESSION_COOKIE_MAX_AGE_SECONDS,
)
from tutorial_quiz.core.errors import ExtensionContractViolation
from tutorial_quiz.core.i18n import localize
from tutorial_quiz.core.services.question_session import QuestionSession
from tutorial_quiz.core.tutorial_manager import TutorialManager
from tutorial_quiz.ui.document import render_document_question, render_document_quiz
from tutorial_quiz.ui.question_renderer import render_question


def _ensure_session(request: Request, response: Response) -> str:
    session_id = request.cookies.get(SESSION_COOKIE)
    if session_id:
        return session_id
    session_id = uuid4().hex
    response.set_cookie(
        key=SESSION_COOKIE,
        value=session_id,
        max_age=SESSION_COOKIE_MAX_AGE_SECONDS,
        samesite="lax",
        httponly=True,
    )
    return session_id


_TUTORIAL_PAGE_HTML = """<!doctype html>
<html lang=\"en\">
  <head>
    <meta charset=\"utf-8\" />
    <title>Tutorial</title>
    <meta name=\"viewport\" content=\"width=device-width, initial-scale=1\" />
    <style>
      body { font-family: 'Segoe UI', system-ui, sans-serif; max-width: 48rem; margin: 0 auto; padding: 1.5rem; }
      .tutorial-question-container { border: 1px solid #d0d7de; border-radius: 0.5rem; margin-bottom: 1.5rem; }
      .panel-body { padding: 1rem; }
      .tutorial-quiz-title { font-weight: 600; font-size: 1.2rem; margin: 1rem 0; }
      .alert { border-radius: 0.4rem; padding: 0.75rem; margin: 0.75rem 0; }
      .alert-success { background: #dcfce7; }
      .alert-danger { background: #fee2e2; }
      .alert-info { background: #e0f2fe; }
      .btn { border: none; border-radius: 0.4rem; padding: 0.5rem 1rem; color: #fff; cursor: pointer; }
      .btn-primary { background: #1f6feb; }
      .btn-warning { background: #d97706; }
      .disabled, [disabled] { opacity: 0.6; cursor: not-allowed; }
      label.correct { font-weight: 600; color: #15803d; }
      label.incorrect { text-decoration: line-through; color: #b91c1c; }
      .placeholder { display: inline-block; height: 1em; background: #e5e7eb; margin-right: 0.3rem; }
    </style>
    <script>
      window.MathJax = { tex: { inlineMath: [['$','$']], displayMath: [['$$','$$']] } };
      window.Tutorial = { triggerMathJax: function () { if (window.MathJax && MathJax.typesetPromise) MathJax.typesetPromise(); } };
    </script>
    <script defer src=\"https://cdn.jsdelivr.net/npm/mathjax@3/es5/tex-mml-chtml.js\"></script>
  </head>
  <body>
    __CONTENT__
    <script>
      function readAnswer(container) {
        const checked = container.querySelectorAll('input[type=checkbox]:checked');
        if (container.querySelector('input[type=checkbox]')) {
          return Array.from(checked).map(function (el) { return el.value; });
        }
        const radio = container.querySelector('input[type=radio]:checked');
        if (container.querySelector('input[type=radio]')) {
          return radio ? radio.value : null;
        }
        const field = container.querySelector('input, textarea');
        return field ? field.value : null;
      }

      function applyView(questionId, view) {
        document.getElementById(questionId + '-answer_container').innerHTML = view.answers_html;
        document.getElementById(questionId + '-message_container').innerHTML = view.messages_html;
        document.getElementById(questionId + '-action_button_container').innerHTML = view.button_html;
        const container = document.querySelector('[data-label=\"' + questionId + '\"]');
        container.dataset.buttonState = view.button_state;
        if (window.Tutorial.triggerMathJax) window.Tutorial.triggerMathJax();
      }

      async function call(method, url, body) {
        const response = await fetch(url, {
          method: method,
          headers: { 'Content-Type': 'application/json' },
          body: body === undefined ? undefined : JSON.stringify(body),
        });
        return response.json();
      }

      document.querySelectorAll('.tutorial-question').forEach(function (container) {
        const questionId = container.dataset.label;
        const base = '/questions/' + encodeURIComponent(questionId);
        call('GET', base).then(function (view) { applyView(questionId, view); });

        container.addEventListener('input', async function () {
          const answers = document.getElementById(questionId + '-answer_container');
          const view = await call('POST', base + '/answer', { answer: readAnswer(answers) });
          document.getElementById(questionId + '-action_button_container').innerHTML = view.button_html;
          container.dataset.buttonState = view.button_state;
        });

        container.addEventListener('click', async function (event) {
          if (!event.target.closest('.action-button') || event.target.closest('[disabled]')) return;
          const action = container.dataset.buttonState === 'try_again' ? '/try-again' : '/submit';
          const view = await call('POST', base + action);
          if (view.answers_html !== undefined) applyView(questionId, view);
        });
      });
    </script>
  </body>
</html>
"""


class AnswerPayload(BaseModel):
    """Payload schema for candidate answers."""

    answer: str | float | list[str] | None = None


def _get_tutorial_manager_dependency(tutorial_manager: TutorialManager):
    def dependency() -> TutorialManager:
        return tutorial_manager

    return dependency


def _view_payload(session: QuestionSession, manager: TutorialManager) -> dict[str, object]:
    view = render_question(session, catalog=manager.context.catalog)
    result = session.grading_result
    payload = view.to_dict()
    payload.update(
        {
            "button_state": session.button_state.value,
            "is_done": session.is_done,
            "correct": None if result is None else result.correct,
        }
    )
    return payload


def _render_tutorial_page(manager: TutorialManager) -> str:
    context = manager.context
    parts: list[Markup] = []
    quizzed: set[str] = set()
    for tutorial_quiz in manager.get_quizzes():
        caption = localize(tutorial_quiz.caption, context.catalog)
        tutorial_quiz = replace(tutorial_quiz, caption=caption)
        parts.append(render_document_quiz(tutorial_quiz, context).html)
        quizzed.update(q.question_id for q in tutorial_quiz.questions)
    for question in manager.get_questions():
        if question.question_id not in quizzed:
            parts.append(render_document_question(question, context).html)
    return _TUTORIAL_PAGE_HTML.replace("__CONTENT__", str(Markup("\n").join(parts)))


def create_api_app(tutorial_manager: TutorialManager) -> FastAPI:
    """Create a FastAPI application wired to the provided tutorial manager."""
    app = FastAPI(title=f"{APP_NAME} API", version=APP_VERSION)
    manager_dep = _get_tutorial_manager_dependency(tutorial_manager)

    def _question_view(session_id: str, question_id: str, manager: TutorialManager, action: str) -> dict[str, object]:
        try:
            with manager.question_session(session_id, question_id) as session:
                if action == "submit" and session.submit() is None:
                    raise HTTPException(status_code=409, detail="Answer cannot be submitted in the current state.")
                if action == "try_again" and not session.try_again():
                    raise HTTPException(status_code=409, detail="Question cannot be reset in the current state.")
                return _view_payload(session, manager)
        except KeyError as exc:
            raise HTTPException(status_code=404, detail=f"Unknown question '{question_id}'.") from exc
        except ExtensionContractViolation as exc:
            raise HTTPException(status_code=500, detail=str(exc)) from exc
        except RuntimeError as exc:
            raise HTTPException(status_code=409, detail=str(exc)) from exc

    @app.get("/", response_class=HTMLResponse)
    def serve_tutorial_page(
        request: Request,
        response: Response,
        manager: TutorialManager = Depends(manager_dep),
    ) -> str:
        _ensure_session(request, response)
        return _render_tutorial_page(manager)

    @app.get("/questions/{question_id}")
    def get_question_view(
        question_id: str,
        request: Request,
        response: Response,
        manager: TutorialManager = Depends(manager_dep),
    ) -> dict[str, object]:
        session_id = _ensure_session(request, response)
        return _question_view(session_id, question_id, manager, "view")

    @app.post("/questions/{question_id}/answer")
    def update_candidate(
        question_id: str,
        payload: AnswerPayload,
        request: Request,
        response: Response,
        manager: TutorialManager = Depends(manager_dep),
    ) -> dict[str, object]:
        session_id = _ensure_session(request, response)
        try:
            manager.set_candidate(session_id, question_id, payload.answer)
        except KeyError as exc:
            raise HTTPException(status_code=404, detail=f"Unknown question '{question_id}'.") from exc
        except ExtensionContractViolation as exc:
            raise HTTPException(status_code=500, detail=str(exc)) from exc
        return _question_view(session_id, question_id, manager, "view")

    @app.post("/questions/{question_id}/submit")
    def submit_answer(
        question_id: str,
        request: Request,
        response: Response,
        manager: TutorialManager = Depends(manager_dep),
    ) -> dict[str, object]:
        session_id = _ensure_session(request, response)
        return _question_view(session_id, question_id, manager, "submit")

    @app.post("/questions/{question_id}/try-again")
    def try_again(
        question_id: str,
        request: Request,
        response: Response,
        manager: TutorialManager = Depends(manager_dep),
    ) -> dict[str, object]:
        session_id = _ensure_session(request, response)
        return _question_view(session_id, question_id, manager, "try_again")

    @app.get("/progress")
    def get_progress(
        request: Request,
        response: Response,
        manager: TutorialManager = Depends(manager_dep),
    ) -> dict[str, object]:
        session_id = _ensure_session(request, response)
        reports = manager.get_progress(session_id)
        return {
            "questions": {label: report.to_dict() for label, report in reports.items()},
            "answered": len(reports),
            "correct": sum(1 for report in reports.values() if report.correct),
            "total": len(manager.get_questions()),
        }

    @app.delete("/session", status_code=204)
    def end_session(
        request: Request,
        response: Response,
        manager: TutorialManager = Depends(manager_dep),
    ) -> Response:
        session_id = request.cookies.get(SESSION_COOKIE)
        if session_id:
            manager.end_session(session_id, forget_state=True)
        response.delete_cookie(SESSION_COOKIE)
        response.status_code = 204
        return response

    return app


def start_api_server(
    tutorial_manager: TutorialManager,
    host: str = DEFAULT_HOST,
    port: int = DEFAULT_PORT,
) -> Thread:
    """Start the FastAPI server in a background daemon thread."""
    app = create_api_app(tutorial_manager)
    config = uvicorn.Config(app=app, host=host, port=port, log_level="info")
    server = uvicorn.Server(config)

    def run_server() -> None:
        server.run()

    thread = Thread(target=run_server, name="TutorialApiServer", daemon=True)
    thread.start()
    return thread
