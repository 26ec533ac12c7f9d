import random
from collections.abc import Iterator

import pytest
from fastapi.testclient import TestClient

from deepscan.config.settings import Settings
from deepscan.http.app import create_app
from deepscan.http.services import Services, build_services
from tests.helpers import FakeClock


@pytest.fixture
def services(test_settings: Settings, clock: FakeClock) -> Services:
    return build_services(test_settings, clock=clock, rng=random.Random(7))


@pytest.fixture
def client(test_settings: Settings, services: Services) -> Iterator[TestClient]:
    with TestClient(create_app(test_settings, services)) as test_client:
        yield test_client
