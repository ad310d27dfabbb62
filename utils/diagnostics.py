import json
import logging
import os
from datetime import datetime, timezone
from typing import Any

from utils.html_utils import slugify

logger = logging.getLogger(__name__)


def run_timestamp(now: datetime = None) -> str:
    """ISO-8601 timestamp that is safe to use as a directory name."""
    now = now or datetime.now(timezone.utc)
    stamp = now.isoformat(timespec="milliseconds").replace("+00:00", "Z")
    return stamp.replace(":", "-").replace(".", "-")


class NullDiagnostics:
    """Diagnostics sink that records nothing. Used by tests and when debugging is off."""

    directory = ""

    async def screenshot(self, page, name: str) -> None:
        return None

    async def dump_html(self, page, name: str) -> None:
        return None

    def write_json(self, name: str, data: Any) -> None:
        return None


class DebugArtifacts(NullDiagnostics):
    """
    Writes screenshots, HTML dumps and JSON dumps for one scrape run into
    {root}/{hackathon-slug}/{timestamp}/. Every failure here is logged and
    swallowed so debugging output never changes the outcome of a run.
    """

    def __init__(self, root: str, hackathon_name: str, timestamp: str = None):
        self.directory = os.path.abspath(
            os.path.join(root, slugify(hackathon_name), timestamp or run_timestamp())
        )
        try:
            os.makedirs(self.directory, exist_ok=True)
            logger.info(f"📁 Created debug directory: {self.directory}")
        except OSError as e:
            logger.warning(f"⚠️ Could not create debug directory: {e}")

    def _path(self, name: str) -> str:
        return os.path.join(self.directory, name)

    async def screenshot(self, page, name: str) -> None:
        try:
            await page.screenshot(path=self._path(name), full_page=True)
            logger.debug(f"Screenshot saved to {self._path(name)}")
        except Exception as e:
            logger.warning(f"⚠️ Could not save screenshot {name}: {e}")

    async def dump_html(self, page, name: str) -> None:
        try:
            html = await page.content()
            with open(self._path(name), "w", encoding="utf-8") as f:
                f.write(html)
        except Exception as e:
            logger.warning(f"⚠️ Could not dump HTML {name}: {e}")

    def write_json(self, name: str, data: Any) -> None:
        try:
            with open(self._path(name), "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2, default=str)
        except (OSError, TypeError, ValueError) as e:
            logger.warning(f"⚠️ Could not write {name}: {e}")
