"""
Read-only access to the submissions table.

Every query orders by created_at descending so the newest entry for a
winner always comes first.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Optional

from postgrest.exceptions import APIError
from pydantic import BaseModel, ConfigDict
from supabase import Client

from submissions_bot.logging_config import bot_logger as logger

DEFAULT_LIST_LIMIT = 999


class DocumentSide(str, Enum):
    FRONT = "front"
    BACK = "back"


class Submission(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: int | str
    winner_id: Optional[str] = None
    full_name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    payment_preference: Optional[str] = None
    delivery_company: Optional[str] = None
    heard_from: Optional[str] = None  # referral source
    submitted_at: Optional[str] = None
    created_at: Optional[str] = None
    driver_license_front: Optional[str] = None
    driver_license_back: Optional[str] = None

    def document_url(self, side: DocumentSide) -> Optional[str]:
        """URL of the requested license side, or None when missing or blank."""
        if side == DocumentSide.FRONT:
            url = self.driver_license_front
        else:
            url = self.driver_license_back
        return url or None


class SubmissionQueryError(Exception):
    """Raised when the remote store rejects or fails a query."""


class SubmissionRepository:
    """Thin wrapper over the Supabase table. Never mutates remote data."""

    def __init__(self, client: Client, table: str = "submissions"):
        self.client = client
        self.table = table

    def _select(self):
        return self.client.table(self.table).select("*")

    def _run(self, query, description: str) -> list[dict[str, Any]]:
        try:
            response = query.execute()
        except APIError as e:
            logger.error(f"Query failed ({description}): {e.message}", exc_info=True)
            raise SubmissionQueryError(e.message or str(e)) from e
        return response.data or []

    def fetch_all(self, limit: int = DEFAULT_LIST_LIMIT) -> list[Submission]:
        query = self._select().order("created_at", desc=True).limit(limit)
        rows = self._run(query, "fetch_all")
        logger.info(f"Fetched {len(rows)} submissions (limit={limit})")
        return [Submission.model_validate(row) for row in rows]

    def fetch_by_winner_id(self, winner_id: str) -> list[Submission]:
        query = self._select().eq("winner_id", winner_id).order("created_at", desc=True)
        rows = self._run(query, f"winner_id={winner_id}")
        logger.info(f"Fetched {len(rows)} submissions for winner_id={winner_id}")
        return [Submission.model_validate(row) for row in rows]

    def fetch_by_id(self, submission_id: int | str) -> Submission | None:
        query = self._select().eq("id", submission_id).limit(1)
        rows = self._run(query, f"id={submission_id}")
        if not rows:
            return None
        return Submission.model_validate(rows[0])
