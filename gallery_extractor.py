import logging
from typing import List, Optional

from bs4 import Tag

from config import (
    ENTRY_LINK_SELECTORS,
    ENTRY_TAGLINE_SELECTORS,
    ENTRY_THUMBNAIL_SELECTORS,
    ENTRY_TITLE_SELECTORS,
    GALLERY_ENTRY_SELECTORS,
    WINNER_BADGE_SELECTORS,
)
from models.project import ProjectSummary
from utils.html_utils import absolute_url, first_line, make_soup, node_text, select_first

logger = logging.getLogger(__name__)


def _entry_summary(entry: Tag, page_url: str) -> ProjectSummary:
    title = first_line(node_text(select_first(entry, ENTRY_TITLE_SELECTORS)))
    tagline = node_text(select_first(entry, ENTRY_TAGLINE_SELECTORS))

    link = select_first(entry, ENTRY_LINK_SELECTORS)
    if link is None and entry.name == "a":
        link = entry
    devpost_url = absolute_url(link.get("href") if link is not None else None, page_url) or ""

    image = select_first(entry, ENTRY_THUMBNAIL_SELECTORS)
    thumbnail_url = None
    if image is not None:
        thumbnail_url = absolute_url(image.get("src") or image.get("data-src"), page_url)

    is_winner = any(entry.select_one(selector) is not None for selector in WINNER_BADGE_SELECTORS)

    return ProjectSummary(
        title=title,
        tagline=tagline,
        devpost_url=devpost_url,
        thumbnail_url=thumbnail_url,
        is_winner=is_winner,
    )


def extract_gallery_projects(html: str, page_url: str) -> List[ProjectSummary]:
    """
    Extract every project card from a rendered project-gallery page, in DOM order.

    Args:
        html (str): The gallery page HTML after the projects have loaded.
        page_url (str): URL of the gallery page, used to resolve relative links.

    Returns:
        List[ProjectSummary]: One summary per entry element, duplicates included.
    """
    soup = make_soup(html)
    entries = soup.select(", ".join(GALLERY_ENTRY_SELECTORS))
    logger.info(f"Found {len(entries)} project entries")

    projects = []
    for entry in entries:
        # .gallery-item usually wraps a .software-entry; count the outer one only
        if entry.find_parent(class_=[s.lstrip(".") for s in GALLERY_ENTRY_SELECTORS]) is not None:
            continue
        projects.append(_entry_summary(entry, page_url))
    return projects


def dedupe_projects(projects: List[ProjectSummary]) -> List[ProjectSummary]:
    """Collapse entries sharing a detail URL. The first occurrence wins."""
    seen = set()
    unique = []
    for project in projects:
        if not project.devpost_url or project.devpost_url in seen:
            continue
        seen.add(project.devpost_url)
        unique.append(project)
    return unique


def select_winners(projects: List[ProjectSummary], limit: Optional[int] = None) -> List[ProjectSummary]:
    """Keep winners with a detail URL, in gallery order, capped at limit."""
    winners = [p for p in projects if p.is_winner and p.devpost_url]
    if limit is not None:
        winners = winners[:limit]
    return winners
