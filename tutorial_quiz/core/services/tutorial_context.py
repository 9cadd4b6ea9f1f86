"""Explicit bundle of the collaborators a question session needs."""

from __future__ import annotations

from dataclasses import dataclass, field

from tutorial_quiz.core.i18n import TranslationCatalog
from tutorial_quiz.core.services.event_sink import EventSink, LoggingEventSink
from tutorial_quiz.core.services.question_cache import QuestionCache
from tutorial_quiz.core.services.submission_store import InMemorySubmissionStore, SubmissionStore


@dataclass(slots=True)
class TutorialContext:
    store: SubmissionStore = field(default_factory=InMemorySubmissionStore)
    events: EventSink = field(default_factory=LoggingEventSink)
    cache: QuestionCache = field(default_factory=QuestionCache)
    catalog: TranslationCatalog = field(default_factory=TranslationCatalog)
