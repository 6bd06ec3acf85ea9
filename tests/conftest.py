"""Shared fixtures: an in-memory stand-in for Realtime Database references."""

import copy

import pytest

from horizon_talk.models.feedback import Feedback, ImprovedWord
from horizon_talk.storage.user_service import UserService


class FakeDatabase:
    """Nested-dict tree with the subset of the Reference API the app uses."""

    def __init__(self):
        self.root: dict = {}
        self.fail = False
        self._push_count = 0

    def reference(self, path: str = "/") -> "FakeReference":
        return FakeReference(self, [p for p in path.strip("/").split("/") if p])

    def next_key(self) -> str:
        self._push_count += 1
        return f"-push{self._push_count:04d}"


class FakeReference:
    def __init__(self, database: FakeDatabase, parts: list[str]):
        self._db = database
        self._parts = parts

    @property
    def key(self) -> str | None:
        return self._parts[-1] if self._parts else None

    def _check(self) -> None:
        if self._db.fail:
            raise RuntimeError("database unavailable")

    def _node(self, create: bool = False):
        node = self._db.root
        for part in self._parts:
            if not isinstance(node, dict):
                return None
            if part not in node:
                if not create:
                    return None
                node[part] = {}
            node = node[part]
        return node

    def child(self, path: str) -> "FakeReference":
        return FakeReference(self._db, self._parts + path.strip("/").split("/"))

    def get(self):
        self._check()
        return copy.deepcopy(self._node())

    def set(self, value) -> None:
        self._check()
        parent = FakeReference(self._db, self._parts[:-1])._node(create=True)
        parent[self._parts[-1]] = copy.deepcopy(value)

    def update(self, value: dict) -> None:
        self._check()
        self._node(create=True).update(copy.deepcopy(value))

    def push(self, value=""):
        self._check()
        new_ref = self.child(self._db.next_key())
        new_ref.set(value)
        return new_ref

    def transaction(self, transaction_update):
        self._check()
        new_value = transaction_update(self.get())
        self.set(new_value)
        return new_value


@pytest.fixture
def fake_db() -> FakeDatabase:
    return FakeDatabase()


@pytest.fixture
def user_service(fake_db) -> UserService:
    return UserService(reference=fake_db.reference)


@pytest.fixture
def sample_feedback() -> Feedback:
    return Feedback(
        fluency_score=80,
        grammar_score=70,
        vocabulary_usage=3,
        filler_words=2,
        suggestions=["Slow down a little", "Avoid 'uh' between sentences"],
        improved_vocabulary=[
            ImprovedWord(
                word="articulate",
                definition="Able to express ideas clearly",
                example="She gave an articulate answer.",
            )
        ],
    )
