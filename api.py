import asyncio
import logging
from typing import Optional

import uvicorn
from fastapi import APIRouter, Depends, FastAPI, HTTPException, Query
from pydantic import BaseModel, Field

import config
from devpost_scraper import scrape_hackathon
from errors import RepositoryError, ScrapeFailedError
from project_repository import MAX_RANDOM_PROJECTS, ProjectRepository

logger = logging.getLogger(__name__)

_repository: Optional[ProjectRepository] = None


def get_repository() -> ProjectRepository:
    global _repository
    if _repository is None:
        _repository = ProjectRepository.from_env()
    return _repository


class ScrapeHackathonIn(BaseModel):
    hackathon_url: str
    hackathon_name: str
    limit: Optional[int] = Field(default=None, ge=1)


router = APIRouter()


@router.post("/hackathons/scrape")
def post_scrape_hackathon(body: ScrapeHackathonIn, repository: ProjectRepository = Depends(get_repository)):
    # Sync route: FastAPI runs it in its threadpool and the scrape gets its own event loop.
    try:
        result = asyncio.run(scrape_hackathon(
            body.hackathon_url,
            body.hackathon_name,
            body.limit,
            repository=repository,
        ))
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))
    except ScrapeFailedError:
        logger.exception("Scrape failed")
        raise HTTPException(status_code=500, detail="Failed to scrape hackathon")
    return result.model_dump()


@router.get("/projects")
def get_projects(repository: ProjectRepository = Depends(get_repository)):
    try:
        return {"projects": repository.list_projects()}
    except RepositoryError:
        logger.exception("Could not list projects")
        raise HTTPException(status_code=500, detail="Could not load projects, try again later")


@router.get("/projects/random")
def get_random_projects(limit: int = Query(10, ge=1, le=MAX_RANDOM_PROJECTS),
                        repository: ProjectRepository = Depends(get_repository)):
    try:
        return {"projects": repository.random_projects(limit)}
    except RepositoryError:
        logger.exception("Could not sample projects")
        raise HTTPException(status_code=500, detail="Could not load projects, try again later")


@router.get("/projects/count")
def get_project_count(repository: ProjectRepository = Depends(get_repository)):
    try:
        return {"count": repository.count_projects()}
    except RepositoryError:
        logger.exception("Could not count projects")
        raise HTTPException(status_code=500, detail="Could not load projects, try again later")


app = FastAPI(title="Hackathon Inspiration API")
app.include_router(router, prefix="/api")


def main() -> None:
    logging.basicConfig(
        level=config.LOG_LEVEL,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    uvicorn.run(app, host=config.API_HOST, port=config.API_PORT)


if __name__ == "__main__":
    main()
