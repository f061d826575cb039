import copy

import pytest

from group_splitter import utils
from group_splitter.models import Expense, Split


class FakeSnapshot:
    def __init__(self, reference, data):
        self.reference = reference
        self.id = reference.id
        self._data = data

    @property
    def exists(self):
        return self._data is not None

    def to_dict(self):
        return copy.deepcopy(self._data)


class FakeDocumentReference:
    def __init__(self, db, path):
        self._db = db
        self.path = path
        self.id = path[-1]

    def set(self, data):
        self._db.docs[self.path] = copy.deepcopy(data)

    def update(self, fields):
        if self.path not in self._db.docs:
            raise KeyError(f"No document to update: {'/'.join(self.path)}")
        self._db.docs[self.path].update(copy.deepcopy(fields))

    def get(self):
        return FakeSnapshot(self, self._db.docs.get(self.path))

    def delete(self):
        self._db.docs.pop(self.path, None)

    def collection(self, name):
        return FakeCollectionReference(self._db, self.path + (name,))


class FakeCollectionReference:
    def __init__(self, db, path):
        self._db = db
        self.path = path

    def document(self, doc_id):
        return FakeDocumentReference(self._db, self.path + (doc_id,))

    def stream(self):
        depth = len(self.path) + 1
        paths = sorted(
            p for p in self._db.docs
            if len(p) == depth and p[:-1] == self.path
        )
        return [FakeSnapshot(FakeDocumentReference(self._db, p), self._db.docs[p]) for p in paths]


class FakeFirestore:
    """In-memory stand-in for a Firestore client."""

    def __init__(self):
        self.docs = {}

    def collection(self, name):
        return FakeCollectionReference(self, (name,))


@pytest.fixture
def db(monkeypatch):
    fake = FakeFirestore()
    monkeypatch.setattr(utils, "get_db", lambda: fake)
    return fake


@pytest.fixture
def no_db(monkeypatch):
    monkeypatch.setattr(utils, "get_db", lambda: None)


@pytest.fixture
def names():
    return {"a": "Alice", "b": "Bob", "c": "Cara", "d": "Dev"}


def _make_expense(amount, paid_by, shares, expense_id="E001", settled=()):
    """Build an Expense with splits from a {member_id: amount} mapping."""
    return Expense(
        expense_id=expense_id,
        group_id="G001",
        description="test",
        amount=amount,
        category="other",
        paid_by=paid_by,
        splits=[Split(member_id=m, amount=v, settled=m in settled) for m, v in shares.items()],
    )


@pytest.fixture
def make_expense():
    return _make_expense
