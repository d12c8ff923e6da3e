from pathlib import Path

import pytest

from src.platform.config.core_setting import Settings


ENV_EXAMPLE = Path(__file__).resolve().parents[3] / '.env.example'


@pytest.fixture(autouse=True)
def clean_cors_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv('BACKEND_CORS_ORIGINS', raising=False)


class TestCorsOrigins:
    def test_env_example_loads(self) -> None:
        loaded = Settings(_env_file=str(ENV_EXAMPLE))  # type: ignore

        assert loaded.BACKEND_CORS_ORIGINS == ['http://localhost:3000']

    def test_comma_separated_origins(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv(
            'BACKEND_CORS_ORIGINS', 'http://localhost:3000, https://agents.example.com,'
        )

        loaded = Settings(_env_file=None)  # type: ignore

        assert loaded.BACKEND_CORS_ORIGINS == [
            'http://localhost:3000',
            'https://agents.example.com',
        ]

    def test_json_list_origins(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv('BACKEND_CORS_ORIGINS', '["https://agents.example.com"]')

        loaded = Settings(_env_file=None)  # type: ignore

        assert loaded.BACKEND_CORS_ORIGINS == ['https://agents.example.com']

    def test_no_origins_configured(self) -> None:
        loaded = Settings(_env_file=None)  # type: ignore

        assert loaded.BACKEND_CORS_ORIGINS == []
