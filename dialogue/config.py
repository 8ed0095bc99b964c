"""Application configuration via environment variables."""

from __future__ import annotations

import logging

from pydantic_settings import BaseSettings

log = logging.getLogger("dialogue.config")


class Settings(BaseSettings):
    # Branding shown in greetings and confirmations
    brand_name: str = "Malpure Group"
    agent_name: str = "Aditya Malpure"

    # LLM extractor (optional free-text path)
    llm_provider: str = "none"  # "claude", "ollama" or "none"
    anthropic_api_key: str = ""
    anthropic_model: str = "claude-3-5-haiku-latest"
    ollama_model: str = "qwen2.5:7b"
    ollama_url: str = "http://localhost:11434"

    # Twilio WhatsApp
    twilio_account_sid: str = ""
    twilio_auth_token: str = ""
    twilio_whatsapp_number: str = ""
    agent_whatsapp_number: str = ""

    # Catalog / booking collaborators
    catalog_url: str = ""  # empty = use the static JSON catalog
    catalog_data_path: str = ""
    booking_service_url: str = ""  # empty = in-memory bookings
    match_limit: int = 5

    # Google Sheets lead log
    google_service_account_json: str = ""
    google_sheet_id: str = ""
    google_sheet_range: str = "CRM Lead Tracker!A:H"

    # Session store
    session_store_path: str = ""  # empty = in-memory

    # Conversation policy
    hard_reset_hours: float = 24.0
    inactivity_warning_minutes: float = 30.0
    sweep_after_hours: float = 24.0
    collaborator_timeout_seconds: float = 10.0
    name_min_length: int = 2

    # Admin auth
    admin_api_key: str = ""

    # Server
    host: str = "127.0.0.1"
    port: int = 8080
    debug: bool = False

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8", "extra": "ignore"}

    def validate_startup(self) -> list[str]:
        """Validate configuration at startup. Returns warnings, raises on errors."""
        warnings: list[str] = []
        _placeholders = {"sk-ant-...", "AC...", "path/to/service-account.json"}

        if self.llm_provider not in ("claude", "ollama", "none"):
            raise ValueError(
                f"LLM_PROVIDER must be 'claude', 'ollama' or 'none', got {self.llm_provider!r}."
            )

        if self.llm_provider == "claude":
            if not self.anthropic_api_key or self.anthropic_api_key in _placeholders:
                raise ValueError(
                    "ANTHROPIC_API_KEY is missing or still a placeholder. "
                    "Set it in .env or use LLM_PROVIDER=none."
                )

        if self.inactivity_warning_minutes >= self.hard_reset_hours * 60:
            warnings.append(
                "INACTIVITY_WARNING_MINUTES is not shorter than HARD_RESET_HOURS; "
                "the inactivity prompt will never be shown."
            )

        if not self.admin_api_key:
            if self.debug:
                warnings.append(
                    "ADMIN_API_KEY not set. Admin APIs are open (DEBUG=true)."
                )
            else:
                warnings.append(
                    "ADMIN_API_KEY not set. Admin APIs are locked in production. "
                    "Set ADMIN_API_KEY in .env to enable admin access."
                )

        if not self.twilio_account_sid or self.twilio_account_sid in _placeholders:
            warnings.append(
                "TWILIO_ACCOUNT_SID not set; agent alerts and documents are only logged."
            )

        if self.google_sheet_id and (
            not self.google_service_account_json
            or self.google_service_account_json in _placeholders
        ):
            warnings.append(
                "GOOGLE_SHEET_ID set without GOOGLE_SERVICE_ACCOUNT_JSON; lead logging disabled."
            )

        return warnings


settings = Settings()
