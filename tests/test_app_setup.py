"""App factory, configuration guards and request-scoped logging."""

import logging

import pytest
from flask import g, request

from app import create_app
from app.config import ProductionConfig
from app.middleware.logging_config import JSONFormatter, RequestContextFilter


class TestConfig:
    def test_testing_config_loaded(self, app):
        assert app.config["TESTING"] is True
        assert app.config["RATELIMIT_ENABLED"] is False
        assert app.config["ACTIVITY_LOG_MAX_LIMIT"] == 200
        assert app.config["ENTITY_NUMBER_MAX_RETRIES"] == 3

    def test_production_requires_database_url(self, monkeypatch):
        monkeypatch.setattr(ProductionConfig, "SQLALCHEMY_DATABASE_URI", None)
        with pytest.raises(RuntimeError, match="DATABASE_URL"):
            create_app("production")

    def test_production_requires_secret_key(self, monkeypatch):
        monkeypatch.setattr(ProductionConfig, "SQLALCHEMY_DATABASE_URI", "postgresql://rail@db/rail")
        monkeypatch.delenv("SECRET_KEY", raising=False)
        with pytest.raises(RuntimeError, match="SECRET_KEY"):
            ProductionConfig()


class TestRequestLogging:
    def _record(self, msg="hello"):
        return logging.LogRecord("app.test", logging.WARNING, __file__, 1, msg, None, None)

    def test_filter_outside_request(self):
        record = self._record()
        assert RequestContextFilter().filter(record) is True
        assert record.actor_id is None
        assert record.project_id is None

    def test_filter_inside_request(self, app):
        with app.test_request_context("/api/v1/projects/7/rfis", method="POST"):
            g.actor_id = 42
            request.view_args = {"pid": 7}
            record = self._record()
            RequestContextFilter().filter(record)
        assert (record.method, record.path) == ("POST", "/api/v1/projects/7/rfis")
        assert record.actor_id == 42
        assert record.project_id == 7

    def test_json_formatter_includes_context(self):
        record = self._record("Actor 42 denied")
        record.actor_id = 42
        record.project_id = 7
        line = JSONFormatter().format(record)
        assert '"actor_id": 42' in line
        assert '"project_id": 7' in line
        assert '"level": "WARNING"' in line
