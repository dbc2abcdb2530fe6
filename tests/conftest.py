from __future__ import annotations

import pytest
from flask.testing import FlaskClient

from finplan.app import create_app
from finplan.config import Settings


@pytest.fixture()
def client() -> FlaskClient:
    app = create_app(Settings(log_level="WARNING"))
    app.config["TESTING"] = True
    with app.test_client() as test_client:
        yield test_client
