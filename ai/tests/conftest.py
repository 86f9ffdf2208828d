import os
import random
import tempfile
import pytest
from unittest.mock import MagicMock
from pathlib import Path

from dotenv import load_dotenv

# load test env first
env_path = Path(__file__).resolve().parents[1] / '.env.test'
if env_path.exists():
    load_dotenv(env_path)

os.environ.setdefault('TESTING', '1')
os.environ.setdefault('LOG_FILE_PATH', str(Path(tempfile.gettempdir()) / 'smartnotes-test-logs'))


@pytest.fixture(autouse=True)
def silence_logger(monkeypatch):
    # Patch any project logger acquisition to avoid noisy logs
    import smartnotes.utils.logger as logger_mod
    monkeypatch.setattr(logger_mod, 'get_logger', lambda *a, **k: MagicMock())
    yield


@pytest.fixture
def sample_note():
    from tests.fixtures.sample_data import three_paragraph_note
    return three_paragraph_note()


@pytest.fixture
def all_credentials():
    from smartnotes.providers import CredentialStore
    return CredentialStore({
        'OPENAI_API_KEY': 'sk-test',
        'HUGGINGFACE_API_KEY': 'hf_test',
        'MEANINGCLOUD_API_KEY': 'mc-test',
    })


@pytest.fixture
def no_credentials():
    from smartnotes.providers import CredentialStore
    return CredentialStore()


@pytest.fixture
def seeded_rng():
    return random.Random(1234)


@pytest.fixture
def ok_transport():
    from tests.fixtures.fake_transport import ScriptedTransport
    return ScriptedTransport()


@pytest.fixture
def failing_transport():
    from tests.fixtures.fake_transport import FailingTransport
    return FailingTransport('Simulated API error: Rate limit exceeded')


@pytest.fixture
def api_client(monkeypatch, all_credentials):
    from fastapi.testclient import TestClient
    import main as ai_main

    monkeypatch.setattr(ai_main, 'credentials', all_credentials)
    monkeypatch.setattr(ai_main.settings, 'SIMULATED_FAILURE_RATE', 0.0)
    monkeypatch.setattr(ai_main.settings, 'SIMULATED_MIN_LATENCY_S', 0.0)
    monkeypatch.setattr(ai_main.settings, 'SIMULATED_MAX_LATENCY_S', 0.0)
    monkeypatch.setattr(ai_main.settings, 'SIMULATED_BACKEND', True)
    return TestClient(ai_main.app)
