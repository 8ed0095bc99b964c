"""Tests for admin API authentication and startup configuration checks."""

import os
import sys

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import pytest
from fastapi import HTTPException
from fastapi.security import HTTPAuthorizationCredentials

from dialogue.auth import require_admin_token
from dialogue.config import Settings


# ── Fixture: mock settings for auth tests ──────────────────────────

class FakeSettings:
    def __init__(self, admin_api_key="", debug=False):
        self.admin_api_key = admin_api_key
        self.debug = debug


def _creds(token):
    return HTTPAuthorizationCredentials(scheme="Bearer", credentials=token)


# ── Tests: Auth logic ──────────────────────────────────────────────

class TestRequireAdminToken:
    async def test_rejects_no_token_when_key_set(self, monkeypatch):
        monkeypatch.setattr("dialogue.auth.settings", FakeSettings(admin_api_key="secret"))
        with pytest.raises(HTTPException) as exc_info:
            await require_admin_token(credentials=None)
        assert exc_info.value.status_code == 401

    async def test_rejects_wrong_token(self, monkeypatch):
        monkeypatch.setattr("dialogue.auth.settings", FakeSettings(admin_api_key="secret"))
        with pytest.raises(HTTPException) as exc_info:
            await require_admin_token(credentials=_creds("wrong"))
        assert exc_info.value.status_code == 401

    async def test_allows_correct_token(self, monkeypatch):
        monkeypatch.setattr("dialogue.auth.settings", FakeSettings(admin_api_key="secret"))
        await require_admin_token(credentials=_creds("secret"))

    async def test_allows_no_key_debug_mode(self, monkeypatch):
        monkeypatch.setattr("dialogue.auth.settings", FakeSettings(admin_api_key="", debug=True))
        await require_admin_token(credentials=None)

    async def test_rejects_no_key_production(self, monkeypatch):
        monkeypatch.setattr("dialogue.auth.settings", FakeSettings(admin_api_key="", debug=False))
        with pytest.raises(HTTPException) as exc_info:
            await require_admin_token(credentials=None)
        assert exc_info.value.status_code == 403


# ── Tests: Startup validation ──────────────────────────────────────

def _settings(**overrides):
    base = {"_env_file": None, "llm_provider": "none", "admin_api_key": "k", "twilio_account_sid": "AC1"}
    base.update(overrides)
    return Settings(**base)


class TestValidateStartup:
    def test_clean_config_has_no_warnings(self):
        assert _settings().validate_startup() == []

    def test_unknown_llm_provider(self):
        with pytest.raises(ValueError):
            _settings(llm_provider="gpt").validate_startup()

    def test_claude_needs_key(self):
        with pytest.raises(ValueError):
            _settings(llm_provider="claude", anthropic_api_key="sk-ant-...").validate_startup()

    def test_missing_admin_key_warns(self):
        warnings = _settings(admin_api_key="").validate_startup()
        assert any("ADMIN_API_KEY" in w for w in warnings)

    def test_inactivity_longer_than_reset_warns(self):
        warnings = _settings(inactivity_warning_minutes=120, hard_reset_hours=1).validate_startup()
        assert any("INACTIVITY_WARNING_MINUTES" in w for w in warnings)

    def test_sheet_without_credentials_warns(self):
        warnings = _settings(google_sheet_id="abc").validate_startup()
        assert any("GOOGLE_SHEET_ID" in w for w in warnings)
