# tests/unit/test_config_cli.py
from unittest.mock import patch

import pytest

from authgateway.app.core.config import load_settings
from authgateway.cli import build_parser, main


def test_settings_from_env(monkeypatch):
    monkeypatch.setenv("PORT", "8080")
    monkeypatch.setenv("APP_CLUSTERS", "4")
    monkeypatch.setenv("COGNITO_APP_CLIENT_ID", "abc")
    monkeypatch.setenv("AMAZON_MQ_HOST", "b-1.mq.example.com")
    monkeypatch.delenv("COGNITO_APP_CLIENT_SECRET", raising=False)

    s = load_settings(dotenv=False)

    assert s.port == 8080
    assert s.workers == 4
    assert s.cognito.client_id == "abc"
    assert s.cognito.client_secret is None
    assert s.queue.host == "b-1.mq.example.com"
    assert s.queue.queues.user_signup == "user-signup-queue"


@pytest.mark.parametrize("raw", ["zero", "0", "-2"])
def test_bad_worker_count_falls_back_to_one(monkeypatch, raw):
    monkeypatch.setenv("APP_CLUSTERS", raw)
    assert load_settings(dotenv=False).workers == 1


def test_parser_commands():
    args = build_parser().parse_args(["serve", "--port", "9000", "--workers", "2"])
    assert (args.command, args.port, args.workers) == ("serve", 9000, 2)
    assert build_parser().parse_args(["consume", "user-login-queue"]).queue == "user-login-queue"


def test_serve_runs_uvicorn_factory(monkeypatch):
    monkeypatch.setenv("APP_CLUSTERS", "3")
    with patch("authgateway.cli.load_settings", side_effect=lambda: load_settings(dotenv=False)), \
            patch("authgateway.cli.uvicorn.run") as run:
        assert main(["serve", "--port", "9000"]) == 0

    target = run.call_args.args[0]
    kwargs = run.call_args.kwargs
    assert target == "authgateway.app.main:create_app"
    assert kwargs["factory"] is True
    assert kwargs["port"] == 9000
    assert kwargs["workers"] == 3
