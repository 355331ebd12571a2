import sys
from pathlib import Path
from types import SimpleNamespace

import pytest

sys.path.append(str(Path(__file__).resolve().parents[1]))

from edura import create_app
from edura.config import TestConfig
from edura.extensions import db
from edura.models import User
from edura.services.completion import CompletionClient

TEST_API_KEY = "sk-test-0123456789"


class FakeSDK:
    """Stands in for ``openai.OpenAI``; replies are consumed in order.

    A reply that is an exception instance is raised instead of returned.
    """

    def __init__(self, *replies):
        self.replies = list(replies)
        self.calls = []
        self.on_call = None
        self.chat = SimpleNamespace(completions=SimpleNamespace(create=self._chat_create))
        self.responses = SimpleNamespace(create=self._responses_create)

    def queue(self, *replies):
        self.replies.extend(replies)

    def _next_reply(self, endpoint, kwargs):
        self.calls.append((endpoint, kwargs))
        if self.on_call is not None:
            self.on_call(endpoint, kwargs)
        reply = self.replies.pop(0)
        if isinstance(reply, BaseException):
            raise reply
        return reply

    def _chat_create(self, **kwargs):
        text = self._next_reply("chat", kwargs)
        return SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content=text))])

    def _responses_create(self, **kwargs):
        return SimpleNamespace(output_text=self._next_reply("responses", kwargs))


@pytest.fixture
def fake_sdk():
    return FakeSDK()


@pytest.fixture
def completion_client(fake_sdk):
    return CompletionClient(TEST_API_KEY, "gpt-4o-mini", sdk_client=fake_sdk)


@pytest.fixture
def app_instance(completion_client):
    app = create_app(TestConfig)
    app.extensions["completion_client"] = completion_client
    ctx = app.app_context()
    ctx.push()
    db.create_all()
    yield app
    db.session.remove()
    db.drop_all()
    ctx.pop()


@pytest.fixture
def client(app_instance):
    return app_instance.test_client()


@pytest.fixture
def user(app_instance):
    user = User(email="learner@example.com", display_name="Learner")
    user.set_password("password123")
    db.session.add(user)
    db.session.commit()
    return user

