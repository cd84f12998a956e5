from unittest.mock import AsyncMock, patch

import pytest
from fastapi.testclient import TestClient

from onboard.app import app
from onboard.core.dependencies import get_storage


@pytest.fixture
def client(storage):
	app.dependency_overrides[get_storage] = lambda: storage
	yield TestClient(app)
	app.dependency_overrides.clear()


@patch("onboard.core.features.monitoring.router.check_db_status", new_callable=AsyncMock)
@patch("onboard.core.features.monitoring.router.check_storage_status", new_callable=AsyncMock)
def test_health_check_ok(mock_storage, mock_db, client):
	mock_db.return_value = True
	mock_storage.return_value = True

	response = client.get("/monitoring/health")
	assert response.status_code == 200
	assert response.json() == {
		"status": "ok",
		"details": {
			"database": "up",
			"storage": "up"
		}
	}


@patch("onboard.core.features.monitoring.router.check_db_status", new_callable=AsyncMock)
@patch("onboard.core.features.monitoring.router.check_storage_status", new_callable=AsyncMock)
def test_health_check_fail(mock_storage, mock_db, client):
	mock_db.return_value = False
	mock_storage.return_value = True

	response = client.get("/monitoring/health")
	assert response.status_code == 200
	assert response.json() == {
		"status": "error",
		"details": {
			"database": "down",
			"storage": "up"
		}
	}


def test_metrics_endpoint(client):
	response = client.get("/monitoring/metrics")
	assert response.status_code == 200
	assert "onboard_progress_recomputes_total" in response.text
