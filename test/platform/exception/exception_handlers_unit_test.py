from fastapi import FastAPI
from fastapi.testclient import TestClient
from pydantic import BaseModel
import pytest

from src.platform.exception.exception_handlers import register_exception_handlers
from src.platform.exception.exceptions import (
    CapacityExceededError,
    HoldNotFoundError,
    LockTimeoutError,
)


class HoldRequest(BaseModel):
    quantity: int


@pytest.fixture(scope='module')
def client() -> TestClient:
    app = FastAPI()
    register_exception_handlers(app)

    @app.get('/capacity')
    async def capacity() -> None:
        raise CapacityExceededError()

    @app.get('/missing')
    async def missing() -> None:
        raise HoldNotFoundError()

    @app.get('/busy')
    async def busy() -> None:
        raise LockTimeoutError()

    @app.get('/value')
    async def value() -> None:
        raise ValueError('quantity must be positive')

    @app.get('/boom')
    async def boom() -> None:
        raise RuntimeError('unexpected')

    @app.post('/hold')
    async def hold(payload: HoldRequest) -> HoldRequest:
        return payload

    return TestClient(app, raise_server_exceptions=False)


class TestExceptionHandlers:
    @pytest.mark.parametrize(
        'path, status_code, detail',
        [
            ('/capacity', 409, 'Not enough seats available'),
            ('/missing', 404, 'Hold not found'),
            ('/value', 400, 'quantity must be positive'),
        ],
    )
    def test_errors_map_to_status(
        self, client: TestClient, path: str, status_code: int, detail: str
    ) -> None:
        response = client.get(path)

        assert response.status_code == status_code
        assert response.json() == {'detail': detail}

    def test_lock_timeout_asks_to_retry(self, client: TestClient) -> None:
        response = client.get('/busy')

        assert response.status_code == 503
        assert response.headers['Retry-After'] == '1'

    def test_request_validation_is_bad_request(self, client: TestClient) -> None:
        response = client.post('/hold', json={'quantity': 'four'})

        assert response.status_code == 400
        assert response.json()['detail'][0]['loc'] == ['body', 'quantity']

    def test_unhandled_error_hides_details(self, client: TestClient) -> None:
        response = client.get('/boom')

        assert response.status_code == 500
        assert response.json() == {'detail': 'Internal server error'}
