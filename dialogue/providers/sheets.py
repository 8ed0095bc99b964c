"""Google Sheets CRM lead log.

Uses a Google Cloud service account to append rows to the lead tracker
sheet via the Sheets API v4.  The service account JSON key path is read from
``GOOGLE_SERVICE_ACCOUNT_JSON`` unless passed explicitly.
"""

from __future__ import annotations

import asyncio
import logging
import os
from datetime import datetime
from functools import partial
from typing import Any, Callable

from google.oauth2.service_account import Credentials
from googleapiclient.discovery import build
from googleapiclient.errors import HttpError

from dialogue.errors import CollaboratorFailure
from dialogue.models.booking import LeadRecord
from dialogue.models.session import utcnow
from dialogue.providers.base import LeadLog

logger = logging.getLogger(__name__)

SCOPES = ["https://www.googleapis.com/auth/spreadsheets"]
DEFAULT_RANGE = "CRM Lead Tracker!A:H"


class GoogleSheetsLeadLog(LeadLog):
    """LeadLog backed by Google Sheets API v4."""

    def __init__(
        self,
        spreadsheet_id: str,
        service_account_path: str | None = None,
        sheet_range: str = DEFAULT_RANGE,
        service: Any = None,
        now: Callable[[], datetime] = utcnow,
    ) -> None:
        if not spreadsheet_id:
            raise ValueError("A Google Sheet ID is required for the lead log.")
        self._spreadsheet_id = spreadsheet_id
        self._range = sheet_range
        self._now = now

        if service is None:
            sa_path = service_account_path or os.environ.get("GOOGLE_SERVICE_ACCOUNT_JSON", "")
            if not sa_path:
                raise ValueError(
                    "Google service account JSON path must be provided via "
                    "constructor argument or GOOGLE_SERVICE_ACCOUNT_JSON env var."
                )
            credentials = Credentials.from_service_account_file(sa_path, scopes=SCOPES)
            service = build("sheets", "v4", credentials=credentials, cache_discovery=False)
        self._service = service

    async def _run_in_executor(self, func, *args, **kwargs) -> Any:
        """Run a synchronous Google API call in the default thread pool."""
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, partial(func, *args, **kwargs))

    def _timestamp(self) -> str:
        return self._now().strftime("%d %b %Y, %I:%M %p")

    async def append(self, lead: LeadRecord) -> None:
        body = {"values": [lead.to_row(self._timestamp())]}
        try:
            result = await self._run_in_executor(
                self._service.spreadsheets()
                .values()
                .append(
                    spreadsheetId=self._spreadsheet_id,
                    range=self._range,
                    valueInputOption="USER_ENTERED",
                    body=body,
                )
                .execute
            )
        except HttpError as exc:
            logger.warning("Google Sheets append failed (status %s)", exc.resp.status)
            raise CollaboratorFailure("lead_log", exc) from exc

        updated = result.get("updates", {}).get("updatedCells", 0)
        logger.info("%s cells appended to Google Sheet", updated)
