import logging
from unittest.mock import patch

import pytest
from django.db import OperationalError, connection

pytestmark = pytest.mark.integration


class TestHealthCheck:
    def test_healthy_service_returns_200(self, client):
        response = client.get("/health")

        assert response.status_code == 200
        data = response.json()
        assert data["service"] == "delivery-orders"
        assert data["status"] == "healthy"
        assert "timestamp" in data
        assert data["checks"]["database"]["status"] == "up"
        assert data["checks"]["database"]["vendor"] == connection.vendor
        assert data["checks"]["cache"] == {
            "status": "up",
            "backend": "LocMemCache",
            "response_time_ms": data["checks"]["cache"]["response_time_ms"],
        }

    def test_cache_failure_returns_503(self, client):
        with patch("modules.core.views.cache") as cache:
            cache.get.return_value = None
            response = client.get("/health")

        assert response.status_code == 503
        data = response.json()
        assert data["status"] == "unhealthy"
        assert data["checks"]["cache"] == {"status": "down", "error": "ConnectionError"}
        assert data["checks"]["database"]["status"] == "up"

    def test_database_failure_is_reported_and_logged(self, client, caplog):
        with patch("modules.core.views.connection") as db:
            db.cursor.side_effect = OperationalError("server closed")
            with caplog.at_level(logging.INFO):
                response = client.get("/health")

        assert response.status_code == 503
        data = response.json()
        assert data["checks"]["database"] == {
            "status": "down",
            "error": "OperationalError",
        }
        assert data["checks"]["cache"]["status"] == "up"
        errors = [r for r in caplog.records if r.levelno == logging.ERROR]
        assert any("health.database_down" in r.getMessage() for r in errors)
