"""Shared pytest fixtures for the LingoSphere test suite."""

import asyncio
import json
import pytest

import sys
from pathlib import Path

# Add project root to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from content import ContentGenerator
from models import User
from session import SessionContext
from storage import SessionStore, SQLiteKeyValueStore, init_schema


class ScriptedGenerator(ContentGenerator):
    """ContentGenerator whose raw model responses are queued by the test.

    Each queued item is returned from ``_request`` in order: strings as-is,
    dicts and lists as JSON, exceptions raised. Everything above ``_request``
    (JSON parsing, error mapping) runs for real.
    """

    def __init__(self, *responses):
        super().__init__(client=None, model="test-model")
        self.responses = list(responses)
        self.calls: list[dict] = []
        self.gate: asyncio.Event | None = None

    def queue(self, *responses) -> None:
        self.responses.extend(responses)

    async def _request(self, contents, schema, system_instruction):
        self.calls.append(
            {"contents": contents, "schema": schema, "system_instruction": system_instruction}
        )
        if self.gate is not None:
            await self.gate.wait()
        if not self.responses:
            raise AssertionError("No scripted response left")
        response = self.responses.pop(0)
        if isinstance(response, BaseException):
            raise response
        if isinstance(response, (dict, list)):
            return json.dumps(response)
        return response


@pytest.fixture
def test_db_path(tmp_path) -> Path:
    """Create a temporary database path for testing."""
    db_path = tmp_path / "test_lingosphere.db"
    init_schema(db_path)
    return db_path


@pytest.fixture
def kv_store(test_db_path) -> SQLiteKeyValueStore:
    return SQLiteKeyValueStore(test_db_path)


@pytest.fixture
def session_store(kv_store) -> SessionStore:
    return SessionStore(kv_store)


@pytest.fixture
def user() -> User:
    return User(name="Ana", email="ana@example.com")


@pytest.fixture
def generator() -> ScriptedGenerator:
    return ScriptedGenerator()


@pytest.fixture
def context(user, session_store, generator) -> SessionContext:
    """A fresh session with no reply delay."""
    return SessionContext(user, session_store, generator, reply_delay=0)


@pytest.fixture
def story_response() -> dict:
    return {
        "story": "Tom has a red bike. He rides it to school every day.",
        "question": "What colour is Tom's bike?",
    }


@pytest.fixture
def grammar_response() -> dict:
    return {
        "incorrectSentence": "She go to school every day.",
        "correctSentence": "She goes to school every day.",
        "explanation": "Third person singular verbs take -s.",
    }


@pytest.fixture
def idiom_response() -> dict:
    return {
        "contextSentence": "After the long exam, I was ___.",
        "correctIdiom": "under the weather",
        "options": ["Feeling ill", "Very happy", "Outside in the rain", "Very rich"],
        "correctMeaning": "Feeling ill",
        "explanation": "'Under the weather' means feeling slightly unwell.",
    }


@pytest.fixture
def exam_questions_response() -> list:
    return [
        {
            "id": 1,
            "type": "mcq",
            "text": "Choose the correct word: I ___ a student.",
            "options": ["am", "is", "are", "be"],
        },
        {"id": 2, "type": "writing", "text": "Describe your morning routine."},
        {"id": 3, "type": "speaking", "text": "Say: 'I would like a coffee, please.'"},
    ]


@pytest.fixture
def speaking_response() -> dict:
    return {
        "accuracyScore": 85,
        "pronunciationTips": [{"word": "weather", "tip": "Soft 'th' as in 'the'."}],
        "fluencyComment": "Smooth and natural.",
        "grammarComment": "No mistakes.",
        "aiResponse": "Great! What did you do next?",
    }
