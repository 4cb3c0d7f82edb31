import pytest
from fastapi.testclient import TestClient

from group_store import GroupStore
from main import app, get_store
from models import Expense, Group


def make_group(members, expenses=(), name="Trip"):
    """Build a validated group from (amount, paid_by, split_between) tuples."""
    return Group(
        name=name,
        members=list(members),
        expenses=[
            Expense(name=f"Expense {i + 1}", amount=amount, paid_by=paid_by, split_between=list(split))
            for i, (amount, paid_by, split) in enumerate(expenses)
        ],
    )


@pytest.fixture
def group_factory():
    """Return the make_group helper."""
    return make_group


@pytest.fixture
def store():
    """Return an empty group store."""
    return GroupStore()


@pytest.fixture
def trip(store):
    """Create a three member group with no expenses."""
    return store.create_group("Goa Trip", ["Asha", "Ben", "Chen"])


@pytest.fixture
def api_client(store):
    """Return an API client bound to a fresh store."""
    app.dependency_overrides[get_store] = lambda: store
    yield TestClient(app)
    app.dependency_overrides.clear()
