"""
Shared fixtures. The Linkvertise API is never called: the app gets a
FakeOracle whose answer each test controls.
"""

import pytest

from keygen_app.app import create_app
from keygen_app.config import Settings
from keygen_app.ledger import InMemoryLedger

KEY_PATTERN = r"^[0-9A-F]{5}(-[0-9A-F]{5}){3}$"


class FakeOracle:
    def __init__(self, answer: bool = True):
        self.answer = answer
        self.calls = []

    def __call__(self, completion_hash: str) -> bool:
        self.calls.append(completion_hash)
        return self.answer


@pytest.fixture
def settings() -> Settings:
    return Settings(
        verification_token="test-token",
        key_salt="test-salt",
        admin_key="test-admin",
        environment="development",
    )


@pytest.fixture
def ledger() -> InMemoryLedger:
    return InMemoryLedger()


@pytest.fixture
def oracle() -> FakeOracle:
    return FakeOracle()


@pytest.fixture
def app(settings, ledger, oracle):
    app = create_app(settings, ledger=ledger, verifier=oracle)
    app.config["TESTING"] = True
    return app


@pytest.fixture
def client(app):
    return app.test_client()
