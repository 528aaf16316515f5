from __future__ import annotations

import json
from datetime import datetime, timedelta, timezone

import pytest

from mockprep.controller import InterviewPipelineController
from mockprep.persistence.document_store import InMemoryDocumentStore
from mockprep.persistence.records import InterviewRepository

SAMPLE_QUESTIONS = [
    {"question": f"Q{i}", "answer": f"A{i}"} for i in range(1, 6)
]


class FakeGenerator:
    def __init__(self, reply=None, error=None):
        self.reply = reply if reply is not None else json.dumps(SAMPLE_QUESTIONS)
        self.error = error
        self.prompts = []

    def send(self, prompt):
        self.prompts.append(prompt)
        if self.error is not None:
            raise self.error
        return self.reply, {"model": "fake-model", "tokens_in": 10, "tokens_out": 20}


class FakeAuth:
    def __init__(self, user_id="user-1"):
        self.user_id = user_id

    def current_user_id(self):
        return self.user_id


class FakeNavigator:
    def __init__(self):
        self.paths = []

    def go_to(self, path):
        self.paths.append(path)


class FakeNotifier:
    def __init__(self):
        self.notices = []

    def success(self, title, message):
        self.notices.append(("success", title, message))

    def error(self, title, message):
        self.notices.append(("error", title, message))


class StepClock:
    """Deterministic clock: each reading is one second after the last."""

    def __init__(self, start=None):
        self.now = start or datetime(2024, 1, 1, tzinfo=timezone.utc)

    def __call__(self):
        self.now = self.now + timedelta(seconds=1)
        return self.now


@pytest.fixture
def store():
    return InMemoryDocumentStore(clock=StepClock())


@pytest.fixture
def repository(store):
    return InterviewRepository(store)


@pytest.fixture
def generator():
    return FakeGenerator()


@pytest.fixture
def navigator():
    return FakeNavigator()


@pytest.fixture
def notifier():
    return FakeNotifier()


@pytest.fixture
def auth():
    return FakeAuth()


@pytest.fixture
def controller(generator, repository, auth, navigator, notifier):
    return InterviewPipelineController(
        generator=generator,
        repository=repository,
        auth=auth,
        navigator=navigator,
        notifier=notifier,
    )
