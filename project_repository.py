import logging
import random
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from supabase import Client, create_client

import config
from errors import RepositoryError
from models.project import ProjectRecord

logger = logging.getLogger(__name__)

NATURAL_KEY = "devpost_url"
MAX_RANDOM_PROJECTS = 100


def connect_to_supabase(url: Optional[str] = None, key: Optional[str] = None,
                        service_key: Optional[str] = None) -> Client:
    """Connect to Supabase client"""
    url = url or config.SUPABASE_URL
    key = key or config.SUPABASE_KEY
    service_key = service_key or config.SUPABASE_SERVICE_KEY

    if not url:
        raise ValueError("Missing Supabase URL. Add SUPABASE_URL to your .env file.")

    # Use service key if available (bypasses RLS), otherwise use anon key
    key_to_use = service_key or key
    if not key_to_use:
        raise ValueError("Missing Supabase API key. Add SUPABASE_KEY or SUPABASE_SERVICE_KEY to your .env file.")

    if "your-project-id" in url or "your-supabase-anon-key" in key_to_use:
        raise ValueError(
            "You're using placeholder Supabase credentials. Please update your .env file "
            "with your actual Supabase URL and API key (Project Settings > API)."
        )

    if service_key:
        logger.info("Using service key to bypass Row Level Security (RLS) policies")
    else:
        logger.warning("Using anonymous key which may be restricted by Row Level Security (RLS) policies")

    return create_client(url, key_to_use)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ProjectRepository:
    """
    Stores scraped projects in the hackathon_projects table, one row per
    devpost_url. created_at is left to the column default so it is only set
    on the first insert; updated_at is stamped on every write.
    """

    def __init__(self, client: Client, table: str = None, clock=_utcnow):
        self.client = client
        self.table = table or config.PROJECTS_TABLE
        self._clock = clock

    @classmethod
    def from_env(cls) -> "ProjectRepository":
        return cls(connect_to_supabase())

    def _query(self):
        return self.client.table(self.table)

    def upsert(self, record: ProjectRecord) -> Dict[str, Any]:
        """
        Insert the record, or update every mutable column of the existing row
        with the same devpost_url.

        Raises:
            RepositoryError: If Supabase rejects the write.
        """
        payload = record.model_dump(mode="json", exclude={"created_at", "updated_at"})
        payload["updated_at"] = self._clock().isoformat()
        try:
            response = self._query().upsert(payload, on_conflict=NATURAL_KEY).execute()
        except Exception as e:
            message = str(e)
            if "row-level security" in message.lower() or "42501" in message:
                message = ("Row Level Security Error: no permission to write projects. "
                           "Set SUPABASE_SERVICE_KEY or relax the table's RLS policies.")
            raise RepositoryError(f"Could not store {record.devpost_url}: {message}") from e

        rows = response.data or []
        return rows[0] if rows else payload

    def list_projects(self) -> List[Dict[str, Any]]:
        """All stored projects, newest first."""
        try:
            response = self._query().select("*").order("created_at", desc=True).execute()
        except Exception as e:
            raise RepositoryError(f"Could not list projects: {e}") from e
        return response.data or []

    def random_projects(self, limit: int = 10) -> List[Dict[str, Any]]:
        """Up to `limit` projects picked uniformly at random."""
        if limit < 1 or limit > MAX_RANDOM_PROJECTS:
            raise ValueError(f"limit must be between 1 and {MAX_RANDOM_PROJECTS}")
        try:
            keys = [row[NATURAL_KEY] for row in (self._query().select(NATURAL_KEY).execute().data or [])]
            picked = random.sample(keys, min(limit, len(keys)))
            if not picked:
                return []
            rows = self._query().select("*").in_(NATURAL_KEY, picked).execute().data or []
        except Exception as e:
            raise RepositoryError(f"Could not sample projects: {e}") from e

        order = {key: i for i, key in enumerate(picked)}
        return sorted(rows, key=lambda row: order.get(row.get(NATURAL_KEY), len(order)))

    def count_projects(self) -> int:
        try:
            response = self._query().select(NATURAL_KEY, count="exact").limit(1).execute()
        except Exception as e:
            raise RepositoryError(f"Could not count projects: {e}") from e
        return response.count or 0
