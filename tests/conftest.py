"""
Shared fixtures: fake listing repositories and a TestClient wired to them
through FastAPI dependency overrides.
"""

import pytest
from fastapi.testclient import TestClient

from db.connection import get_search_service
from main import app
from services.search_service import UnifiedSearchService
from tests.fakes import build_repositories, make_homestays, make_guides, make_products


@pytest.fixture
def repositories():
    return build_repositories(make_homestays(12), make_guides(7), make_products(4))


@pytest.fixture
def search_service(repositories):
    homestays, guides, products = repositories
    return UnifiedSearchService(homestays, guides, products)


@pytest.fixture
def client(search_service):
    app.dependency_overrides[get_search_service] = lambda: search_service
    yield TestClient(app)
    app.dependency_overrides.clear()
