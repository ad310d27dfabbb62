import argparse
import asyncio
import json
import logging
import sys
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, List, Optional, Tuple, Union

import config
from detail_extractor import extract_project_details
from errors import RepositoryError, ScrapeFailedError
from gallery_extractor import dedupe_projects, extract_gallery_projects, select_winners
from models.project import ProjectDetails, ProjectRecord, ProjectSummary, ScrapeRequest, ScrapeResult
from page_fetcher import PageFetcher, gallery_url_for
from project_repository import ProjectRepository
from utils.diagnostics import DebugArtifacts
from utils.html_utils import slugify
from utils.project_utils import save_projects_to_csv

logger = logging.getLogger(__name__)


class ScrapeState(Enum):
    NOT_STARTED = "not_started"
    GALLERY_LOADING = "gallery_loading"
    GALLERY_LOADED = "gallery_loaded"
    DETAIL_LOADING = "detail_loading"
    DETAIL_EXTRACTED = "detail_extracted"
    DETAIL_FAILED = "detail_failed"
    COMPLETED = "completed"
    FAILED = "failed"


@dataclass(frozen=True)
class Stored:
    project: ProjectSummary
    degraded: bool = False


@dataclass(frozen=True)
class StoreFailed:
    project: ProjectSummary
    error: str


Outcome = Union[Stored, StoreFailed]


def tally(outcomes: Iterable[Outcome]) -> Tuple[int, int]:
    """Fold per-project outcomes into (success_count, error_count)."""
    success_count, error_count = 0, 0
    for outcome in outcomes:
        if isinstance(outcome, Stored):
            success_count += 1
        else:
            error_count += 1
    return success_count, error_count


class HackathonScraper:
    """
    Runs one scrape of a hackathon's winners: gallery, then each winner's
    detail page in order, then storage. A project that fails to load is still
    stored as a placeholder; only browser, gallery navigation and gallery
    timeout failures abort the run.
    """

    def __init__(self, repository: ProjectRepository, diagnostics, fetcher_factory=PageFetcher):
        self.repository = repository
        self.diagnostics = diagnostics
        self.fetcher_factory = fetcher_factory
        self.state = ScrapeState.NOT_STARTED

    def _enter(self, state: ScrapeState) -> None:
        logger.debug(f"State {self.state.value} -> {state.value}")
        self.state = state

    async def run(self, request: ScrapeRequest) -> ScrapeResult:
        logger.info(f"🚀 Starting scrape for hackathon: {request.hackathon_name}")
        logger.info(f"📍 URL: {request.hackathon_url}")
        try:
            async with self.fetcher_factory(self.diagnostics) as fetcher:
                winners = await self._load_winners(fetcher, request)
                outcomes = []
                for index, project in enumerate(winners, start=1):
                    outcomes.append(await self._process(fetcher, index, project, request))
        except Exception as e:
            self._enter(ScrapeState.FAILED)
            logger.error(f"❌ Fatal error scraping hackathon: {e}")
            raise ScrapeFailedError("Failed to scrape hackathon") from e

        self._enter(ScrapeState.COMPLETED)
        success_count, error_count = tally(outcomes)
        logger.info("📊 Final Statistics:")
        logger.info(f"✅ Successfully processed: {success_count} projects")
        logger.info(f"❌ Errors: {error_count} projects")
        return ScrapeResult(
            success_count=success_count,
            error_count=error_count,
            debug_dir=self.diagnostics.directory,
        )

    async def _load_winners(self, fetcher, request: ScrapeRequest) -> List[ProjectSummary]:
        self._enter(ScrapeState.GALLERY_LOADING)
        page = await fetcher.open_gallery(request.hackathon_url)
        await fetcher.await_projects_loaded(page)
        html = await page.content()
        self._enter(ScrapeState.GALLERY_LOADED)

        projects = extract_gallery_projects(html, gallery_url_for(request.hackathon_url))
        unique = dedupe_projects(projects)
        winners = select_winners(unique, request.limit)
        logger.info(f"🏆 Found {len(winners)} winning projects to process out of {len(unique)} total")

        self.diagnostics.write_json("extracted-data.json", {
            "all": [p.model_dump() for p in projects],
            "winners": [p.model_dump() for p in winners],
        })
        self.diagnostics.write_json("winning-projects.json", [
            {"title": p.title, "devpost_url": p.devpost_url} for p in winners
        ])
        return winners

    async def _fetch_details(self, fetcher, project: ProjectSummary) -> ProjectDetails:
        async with fetcher.open_detail(project.devpost_url) as page:
            html = await page.content()
        return extract_project_details(html, project.devpost_url)

    async def _process(self, fetcher, index: int, project: ProjectSummary,
                       request: ScrapeRequest) -> Outcome:
        logger.info(f"🔍 Visiting project: {project.title}")
        logger.info(f"🔗 URL: {project.devpost_url}")
        self._enter(ScrapeState.DETAIL_LOADING)

        dump = {"summary": project.model_dump()}
        try:
            details = await self._fetch_details(fetcher, project)
            record = ProjectRecord.from_details(project, details, request.hackathon_url, request.hackathon_name)
            dump["details"] = details.model_dump()
            self._enter(ScrapeState.DETAIL_EXTRACTED)
        except Exception as e:
            logger.error(f"❌ Error fetching details for {project.title}: {e}")
            record = ProjectRecord.degraded(project, request.hackathon_url, request.hackathon_name)
            dump["error"] = str(e)
            self._enter(ScrapeState.DETAIL_FAILED)

        self.diagnostics.write_json(f"project-{index:02d}-{slugify(project.title)}.json", dump)

        try:
            self.repository.upsert(record)
        except RepositoryError as e:
            logger.error(f"❌ Error storing project: {project.title}: {e}")
            return StoreFailed(project, str(e))

        degraded = "error" in dump
        if degraded:
            logger.info(f"✅ Successfully stored basic project info: {project.title}")
        else:
            logger.info(f"✅ Successfully stored/updated project: {project.title}")
        return Stored(project, degraded=degraded)


async def scrape_hackathon(hackathon_url: str, hackathon_name: str, limit: Optional[int] = None,
                           repository: Optional[ProjectRepository] = None, diagnostics=None,
                           fetcher_factory=PageFetcher) -> ScrapeResult:
    """
    Scrape the winning projects of one Devpost hackathon and upsert them.

    Args:
        hackathon_url (str): Hackathon base URL, e.g. https://deltahacks-xi.devpost.com
        hackathon_name (str): Display name stored with every project.
        limit (Optional[int]): Maximum number of winners to process.

    Returns:
        ScrapeResult: Success/error counts and the diagnostics directory.

    Raises:
        ScrapeFailedError: If the browser, the gallery page or the gallery wait fails.
    """
    request = ScrapeRequest(hackathon_url=hackathon_url, hackathon_name=hackathon_name, limit=limit)
    if repository is None:
        repository = ProjectRepository.from_env()
    if diagnostics is None:
        diagnostics = DebugArtifacts(config.DEBUG_ROOT, request.hackathon_name)
    scraper = HackathonScraper(repository, diagnostics, fetcher_factory=fetcher_factory)
    return await scraper.run(request)


async def scrape_batch(hackathons: List[dict], limit: Optional[int] = config.DEFAULT_LIMIT,
                       repository: Optional[ProjectRepository] = None,
                       delay: float = config.BATCH_DELAY_SECONDS, **kwargs) -> List[dict]:
    """Scrape several hackathons one after the other. A failed hackathon does not stop the batch."""
    repository = repository or ProjectRepository.from_env()
    results = []
    for i, hackathon in enumerate(hackathons):
        name = hackathon.get("name") if isinstance(hackathon, dict) else None
        url = hackathon.get("url") if isinstance(hackathon, dict) else None
        if not name or not url:
            logger.error(f"Skipping batch entry {i}, it needs both url and name: {hackathon!r}")
            results.append({"name": name, "ok": False, "error": "batch entry needs both url and name"})
            continue
        logger.info(f"Starting to scrape {name}...")
        try:
            result = await scrape_hackathon(url, name, limit, repository=repository, **kwargs)
            logger.info(f"Successfully scraped {name}: {result.model_dump()}")
            results.append({"name": name, "ok": True, **result.model_dump()})
        except (ScrapeFailedError, ValueError) as e:
            logger.error(f"Error scraping {name}: {e}")
            results.append({"name": name, "ok": False, "error": str(e)})
        # Small delay between hackathons to avoid rate limiting
        if delay and i < len(hackathons) - 1:
            await asyncio.sleep(delay)
    return results


def parse_args(argv=None):
    p = argparse.ArgumentParser(description="Scrape winning projects from a Devpost hackathon")
    p.add_argument("--url", help="Hackathon base URL, e.g. https://hackthenorth2024.devpost.com")
    p.add_argument("--name", help="Hackathon display name")
    p.add_argument("--limit", type=int, default=None, help="Max winners to process")
    p.add_argument("--batch", type=str, default=None,
                   help="JSON file with a list of {\"url\": ..., \"name\": ...} hackathons")
    p.add_argument("--export-csv", type=str, default=None,
                   help="Write every stored project to this CSV file and exit")
    args = p.parse_args(argv)
    if not args.export_csv and not args.batch and not (args.url and args.name):
        p.error("either --url and --name, --batch or --export-csv is required")
    if args.limit is not None and args.limit < 1:
        p.error("--limit must be a positive integer")
    return args


def main(argv=None) -> int:
    logging.basicConfig(
        level=config.LOG_LEVEL,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    args = parse_args(argv)
    repository = ProjectRepository.from_env()

    if args.export_csv:
        save_projects_to_csv(repository.list_projects(), args.export_csv)
        return 0

    if args.batch:
        with open(args.batch, "r", encoding="utf-8") as f:
            hackathons = json.load(f)
        results = asyncio.run(scrape_batch(hackathons, args.limit or config.DEFAULT_LIMIT, repository=repository))
        return 0 if all(r["ok"] for r in results) else 1

    try:
        result = asyncio.run(scrape_hackathon(args.url, args.name, args.limit, repository=repository))
    except ScrapeFailedError as e:
        logger.error(f"{e}: {e.__cause__}")
        return 1
    print(json.dumps(result.model_dump(), indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
