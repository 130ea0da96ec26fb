from collections.abc import Iterator

import httpx
import pytest
import respx

from adapters.request_executor import RequestExecutor
from core.domain.models import CorrelationContext

BASE_URL = "http://widgets.test"
APP_NAME = "orders-service"
CORRELATION_ID = "corr-1234"


@pytest.fixture
def context() -> CorrelationContext:
    return CorrelationContext(correlation_id=CORRELATION_ID)


@pytest.fixture
def http_client() -> Iterator[httpx.Client]:
    with httpx.Client() as client:
        yield client


@pytest.fixture
def executor(http_client: httpx.Client) -> RequestExecutor:
    return RequestExecutor(APP_NAME, BASE_URL, http_client)


@pytest.fixture
def respx_router() -> Iterator[respx.MockRouter]:
    """
    Intercepts every request to BASE_URL; unmatched requests fail the test.
    """
    with respx.mock(base_url=BASE_URL, assert_all_called=False) as mock:
        yield mock
