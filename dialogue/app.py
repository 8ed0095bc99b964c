"""FastAPI application: WhatsApp webhook and admin endpoints.

Endpoints:

  POST /whatsapp/webhook       Twilio WhatsApp webhook: returns a TwiML reply
  GET  /health                 Health check
  GET  /api/sessions           Admin: session summaries
  GET  /api/sessions/{user_id} Admin: one stored session

The WhatsApp flow:
  1. User message hits POST /whatsapp/webhook as form fields
     (From, Body, NumMedia, MediaUrl0, MediaContentType0)
  2. ConversationService runs one dialogue step for the sender
  3. The reply goes back as <Response><Message>...</Message></Response>;
     an empty <Response/> when the engine sent its reply another way
"""

from __future__ import annotations

from dotenv import load_dotenv
load_dotenv()

import logging
import time
from typing import Optional
from xml.etree.ElementTree import Element, SubElement, tostring

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(name)-20s %(levelname)-7s %(message)s",
)

from fastapi import Depends, FastAPI, Request
from fastapi.responses import JSONResponse, Response

from dialogue.auth import require_admin_token
from dialogue.config import settings
from dialogue.engine import InboundMedia
from dialogue.models.session import redact_pii
from dialogue.service import ConversationService, build_service

log = logging.getLogger("dialogue.app")

_START_TIME = time.time()


def sender_id(from_field: str) -> str:
    """``whatsapp:+919876543210`` -> ``+919876543210``."""
    return from_field.removeprefix("whatsapp:").strip()


def twiml_message(text: Optional[str]) -> str:
    response_el = Element("Response")
    if text:
        message_el = SubElement(response_el, "Message")
        message_el.text = text
    return tostring(response_el, encoding="unicode", xml_declaration=True)


def create_app(service: Optional[ConversationService] = None) -> FastAPI:
    """Create and configure the FastAPI application."""
    if service is None:
        for warning in settings.validate_startup():
            log.warning(warning)
        service = build_service(settings)

    app = FastAPI(
        title="Property Viewing Assistant",
        description="Bilingual WhatsApp assistant for property discovery and site-visit booking",
        version="0.1.0",
    )
    app.state.service = service

    # ── Health check ───────────────────────────────────────────

    @app.get("/health")
    async def health() -> JSONResponse:
        """Lightweight health check; confirms the event loop is responsive."""
        uptime = round(time.time() - _START_TIME, 1)
        return JSONResponse({"status": "ok", "uptime": uptime})

    # ── WhatsApp webhook ───────────────────────────────────────

    @app.post("/whatsapp/webhook")
    async def whatsapp_webhook(request: Request) -> Response:
        form = await request.form()
        user_id = sender_id(str(form.get("From", "")))
        body = str(form.get("Body", ""))

        if not user_id:
            log.warning("Webhook call without a sender")
            return Response(content=twiml_message(None), media_type="application/xml")

        media = None
        try:
            num_media = int(form.get("NumMedia", "0") or 0)
        except ValueError:
            num_media = 0
        if num_media > 0 and form.get("MediaUrl0"):
            media = InboundMedia(
                url=str(form.get("MediaUrl0")),
                kind=str(form.get("MediaContentType0", "")),
            )

        log.info("WhatsApp message from %s (media=%d)", redact_pii(user_id), num_media)
        reply = await service.handle_inbound_message(user_id, body, media)
        return Response(content=twiml_message(reply), media_type="application/xml")

    # ── Admin: sessions ────────────────────────────────────────

    @app.get("/api/sessions", dependencies=[Depends(require_admin_token)])
    async def list_sessions():
        """Return a summary of all stored sessions."""
        sessions = await service.store.list_sessions()
        return JSONResponse({
            "sessions": [
                {
                    "user_id": s.user_id,
                    "state": s.state.value,
                    "language": s.language.value,
                    "appointment_id": s.appointment_id,
                    "is_inactive": s.is_inactive,
                    "last_activity": s.last_activity_timestamp.isoformat(),
                }
                for s in sessions
            ],
            "count": len(sessions),
        })

    @app.get("/api/sessions/{user_id}", dependencies=[Depends(require_admin_token)])
    async def get_session(user_id: str):
        """Return the full stored state of one session."""
        session = await service.get_session(user_id)
        if session is None:
            return JSONResponse({"error": "Session not found"}, status_code=404)
        return JSONResponse(session.model_dump(mode="json"))

    return app


# ── Module-level app instance for uvicorn ──────────────────────

app = create_app()


if __name__ == "__main__":
    import uvicorn

    log_config = uvicorn.config.LOGGING_CONFIG
    log_config["formatters"]["default"]["fmt"] = (
        "%(asctime)s %(name)-12s %(levelname)-8s %(message)s"
    )

    uvicorn.run(
        "dialogue.app:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
        log_config=log_config,
    )
