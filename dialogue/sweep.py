"""Mark long-idle conversations inactive and send them the inactivity notice.

Run periodically (cron, systemd timer):
    python -m dialogue.sweep
    python -m dialogue.sweep --hours 12

SESSION_STORE_PATH must point at the JSONL file the webhook server writes.
"""

from __future__ import annotations

from dotenv import load_dotenv
load_dotenv()

import argparse
import asyncio
import logging

from dialogue.config import settings
from dialogue.models.session import utcnow
from dialogue.service import build_messenger, build_store
from dialogue.timeouts import sweep_inactive

log = logging.getLogger("dialogue.sweep")


async def run_sweep(hours: float) -> list[str]:
    if not settings.session_store_path:
        log.error(
            "SESSION_STORE_PATH is not set; sessions live only in the server's memory "
            "and cannot be swept from another process"
        )
        raise SystemExit(2)
    store = build_store(settings)
    messenger = build_messenger(settings)
    if messenger is None:
        log.warning("Twilio not configured; sessions will be marked but not messaged")
    return await sweep_inactive(
        store,
        messenger,
        utcnow(),
        after_hours=hours,
        timeout=settings.collaborator_timeout_seconds,
    )


def main():
    parser = argparse.ArgumentParser(description="Sweep inactive WhatsApp conversations")
    parser.add_argument(
        "--hours", type=float, default=settings.sweep_after_hours,
        help="Idle hours before a session is marked inactive",
    )
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(name)-20s %(levelname)-7s %(message)s",
    )
    swept = asyncio.run(run_sweep(args.hours))
    print(f"Swept {len(swept)} session(s)")


if __name__ == "__main__":
    main()
