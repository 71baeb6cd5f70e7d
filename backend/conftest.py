import pytest
from django.core.cache import cache


@pytest.fixture(autouse=True)
def fresh_store():
    """Every test starts from a freshly seeded record store and no wizard sessions."""
    from records.store import reset_store

    cache.clear()
    store = reset_store()
    yield store
    cache.clear()


@pytest.fixture
def store(fresh_store):
    return fresh_store


@pytest.fixture
def make_client(db):
    """APIClient authenticated as a fresh user with the given role."""
    from django.contrib.auth import get_user_model
    from rest_framework.test import APIClient

    def _make(role="Admin", username=None):
        User = get_user_model()
        user = User.objects.create_user(
            username=username or f"{role.lower()}_tester",
            email=f"{role.lower()}@example.com",
            password="pass",
            role=role,
        )
        client = APIClient()
        client.force_authenticate(user=user)
        client.user = user
        return client

    return _make
