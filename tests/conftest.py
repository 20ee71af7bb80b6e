import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(ROOT / "backend"))

import app as app_module


@pytest.fixture
def client():
    """Flask test client with default configuration."""
    app_module.app.config.update(TESTING=True, MAX_EXPRESSION_LENGTH=500)
    with app_module.app.test_client() as c:
        yield c
