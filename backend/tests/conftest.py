from __future__ import annotations

import pytest
from starlette.testclient import TestClient

from app.core.dependencies import get_current_admin, get_employee_service, get_item_service
from app.main import app
from app.models.auth import AdminIdentity
from app.services.employee_service import EmployeeService
from app.services.item_service import ItemService
from tests.support import (
    TEST_ADMIN_EMAIL,
    TEST_ADMIN_PASSWORD,
    TEST_JWT_SECRET,
    InMemoryEmployeeStore,
    InMemoryItemStore,
)

# auth cookies are Secure, so the client has to talk https to get them back
BASE_URL = "https://testserver"


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture(autouse=True)
def _auth_settings():
    from app.core.config import settings

    original = (settings.ADMIN_EMAIL, settings.ADMIN_PASSWORD, settings.JWT_SECRET)
    settings.ADMIN_EMAIL = TEST_ADMIN_EMAIL
    settings.ADMIN_PASSWORD = TEST_ADMIN_PASSWORD
    settings.JWT_SECRET = TEST_JWT_SECRET
    yield
    settings.ADMIN_EMAIL, settings.ADMIN_PASSWORD, settings.JWT_SECRET = original


@pytest.fixture
def employee_store():
    return InMemoryEmployeeStore()


@pytest.fixture
def employee_service(employee_store):
    return EmployeeService(employee_store)


@pytest.fixture
def item_service():
    return ItemService(InMemoryItemStore())


@pytest.fixture
def client(employee_service, item_service):
    app.dependency_overrides[get_employee_service] = lambda: employee_service
    app.dependency_overrides[get_item_service] = lambda: item_service
    with TestClient(app, base_url=BASE_URL) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
def mock_admin():
    return AdminIdentity(email=TEST_ADMIN_EMAIL)


@pytest.fixture
def authenticated_client(client, mock_admin):
    app.dependency_overrides[get_current_admin] = lambda: mock_admin
    yield client
