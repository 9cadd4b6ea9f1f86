"""
Tests for the FastAPI session host.
"""

from fastapi.testclient import TestClient
import pytest

from tutorial_quiz.core.models import QuestionStateReport
from tutorial_quiz.core.question_builder import answer, question, quiz
from tutorial_quiz.core.tutorial_manager import TutorialManager
from tutorial_quiz.server.api_server import create_api_app


@pytest.fixture
def manager(context, addition_question):
    tutorial_manager = TutorialManager(context)
    tutorial_manager.register_question(addition_question)
    tutorial_manager.register_quiz(
        quiz(
            question("Sky colour?", answer("blue", correct=True), answer("green"), label="sky"),
        )
    )
    return tutorial_manager


@pytest.fixture
def client(manager):
    return TestClient(create_api_app(manager))


class TestTutorialPage:
    """Tests for the rendered tutorial page."""

    def test_page_contains_every_question(self, client):
        """Test page contains every question."""
        response = client.get("/")
        assert response.status_code == 200
        assert 'data-label="add"' in response.text
        assert 'data-label="sky-1"' in response.text
        assert "tutorial_quiz_session" in response.cookies


class TestQuestionEndpoints:
    """Tests for the per-question endpoints."""

    def test_initial_view(self, client):
        """Test initial view."""
        response = client.get("/questions/add")
        data = response.json()
        assert response.status_code == 200
        assert data["kind"] == "initial"
        assert data["button_state"] == "submit"
        assert data["is_done"] is False
        assert data["correct"] is None

    def test_unknown_question(self, client):
        """Test unknown question."""
        assert client.get("/questions/missing").status_code == 404
        assert client.post("/questions/missing/answer", json={"answer": "x"}).status_code == 404

    def test_retry_flow(self, client):
        """Test retry flow."""
        client.post("/questions/add/answer", json={"answer": "3"})
        submitted = client.post("/questions/add/submit").json()
        assert submitted["correct"] is False
        assert submitted["button_state"] == "try_again"
        assert submitted["kind"] == "try_again"

        reset = client.post("/questions/add/try-again").json()
        assert reset["kind"] == "initial"

        client.post("/questions/add/answer", json={"answer": "4"})
        done = client.post("/questions/add/submit").json()
        assert done["correct"] is True
        assert done["is_done"] is True
        assert done["kind"] == "completed"
        assert done["button_html"] == ""

    def test_submit_without_answer_conflicts(self, client):
        """Test submit without answer conflicts."""
        assert client.post("/questions/add/submit").status_code == 409

    def test_submit_after_done_conflicts(self, client):
        """Test submit after done conflicts."""
        client.post("/questions/add/answer", json={"answer": "4"})
        client.post("/questions/add/submit")
        assert client.post("/questions/add/submit").status_code == 409
        assert client.post("/questions/add/try-again").status_code == 409

    def test_faulted_question(self, client, manager, broken_type):
        """Test faulted question."""
        manager.register_question(question("Custom", answer("x", correct=True), type=broken_type, label="custom"))
        client.post("/questions/custom/answer", json={"answer": "x"})

        assert client.post("/questions/custom/submit").status_code == 500
        assert client.get("/questions/custom").json()["kind"] == "fault"

    def test_numeric_choice_payload(self, client):
        """Test that a JSON number sent to a choice question is accepted."""
        response = client.post("/questions/add/answer", json={"answer": 4})
        assert response.status_code == 200
        assert client.get("/questions/add").status_code == 200

    def test_faulted_restore_shows_fault_view(self, client, manager, store, broken_type, broken_grade_calls):
        """Test that a restored answer hitting a broken type is served as a fault view."""
        manager.register_question(question("Custom", answer("x", correct=True), type=broken_type, label="custom"))
        client.get("/")
        session_id = client.cookies.get("tutorial_quiz_session")
        store.publish_state(session_id, "custom", QuestionStateReport(answer="x", correct=False))

        assert client.get("/questions/custom").status_code == 500
        assert client.get("/questions/custom").json()["kind"] == "fault"
        assert broken_grade_calls() == 1


class TestSessionEndpoints:
    """Tests for progress and session teardown."""

    def test_progress(self, client):
        """Test progress."""
        client.post("/questions/add/answer", json={"answer": "4"})
        client.post("/questions/add/submit")

        progress = client.get("/progress").json()
        assert progress["answered"] == 1
        assert progress["correct"] == 1
        assert progress["total"] == 2
        assert progress["questions"]["add"] == {"type": "question", "answer": "4", "correct": True}

    def test_end_session(self, client, manager, store):
        """Test end session."""
        client.post("/questions/add/answer", json={"answer": "4"})
        client.post("/questions/add/submit")
        session_id = client.cookies.get("tutorial_quiz_session")
        assert manager.has_session(session_id)

        response = client.delete("/session")
        assert response.status_code == 204
        assert manager.has_session(session_id) is False
        assert store.get_session_states(session_id) == {}
