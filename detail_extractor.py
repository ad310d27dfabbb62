import logging
from typing import Callable, List, Optional, TypeVar
from urllib.parse import parse_qs, urlparse

from bs4 import BeautifulSoup, NavigableString, Tag

from config import (
    AWARD_HEADING_SELECTORS,
    AWARD_SECTION_SELECTORS,
    AWARD_SELECTOR,
    CLONED_SLIDE_CLASS,
    COMMENTS_SELECTOR,
    DESCRIPTION_BUILT_WITH_ID,
    DESCRIPTION_GALLERY_ID,
    DESCRIPTION_SELECTORS,
    GALLERY_IMAGE_SELECTOR,
    GITHUB_LINK_SELECTORS,
    LIKES_SELECTOR,
    RECOGNIZED_TECH_CLASS,
    SOFTWARE_LINKS_SELECTORS,
    TEAM_MEMBER_SELECTOR,
    TECHNOLOGY_SELECTORS,
    VIDEO_SELECTORS,
)
from models.project import (
    Award,
    DemoVideo,
    Engagement,
    GalleryImage,
    ProjectDetails,
    TeamMember,
    Technology,
    UNKNOWN_MEMBER,
)
from utils.html_utils import absolute_url, make_soup, node_text, parse_count, sanitize_html, select_first

logger = logging.getLogger(__name__)

T = TypeVar("T")


def _safely(field: str, extract: Callable[[], T], default: T) -> T:
    # One broken field must not cost us the rest of the record
    try:
        return extract()
    except Exception as e:
        logger.warning(f"⚠️ Could not extract {field}: {e}")
        return default


def _select_all_first(soup: BeautifulSoup, selectors: List[str]) -> List[Tag]:
    for selector in selectors:
        nodes = soup.select(selector)
        if nodes:
            return nodes
    return []


def _article_body(soup: BeautifulSoup) -> Optional[str]:
    """The write-up Devpost renders between the image gallery and the 'Built With' block."""
    gallery = soup.find(id=DESCRIPTION_GALLERY_ID)
    if gallery is None:
        return None

    parts = []
    for sibling in gallery.find_next_siblings():
        if sibling.get("id") == DESCRIPTION_BUILT_WITH_ID:
            break
        if sibling.find(id=DESCRIPTION_BUILT_WITH_ID) is not None:
            break
        cleaned = sanitize_html(sibling, keep_root=True)
        if cleaned:
            parts.append(cleaned)
    return "\n".join(parts) or None


def extract_description(soup: BeautifulSoup) -> Optional[str]:
    body = _article_body(soup)
    if body:
        return body

    for selector in DESCRIPTION_SELECTORS:
        node = soup.select_one(selector)
        if node is None:
            continue
        cleaned = sanitize_html(node)
        if cleaned:
            return cleaned
    return None


def extract_technologies(soup: BeautifulSoup, page_url: str) -> List[Technology]:
    technologies = []
    for node in _select_all_first(soup, TECHNOLOGY_SELECTORS):
        name = node_text(node)
        if not name:
            continue
        link = node if node.name == "a" else node.find("a")
        classes = node.get("class") or []
        technologies.append(Technology(
            name=name,
            url=absolute_url(link.get("href"), page_url) if link is not None else None,
            is_recognized=RECOGNIZED_TECH_CLASS in classes,
        ))
    return technologies


def _team_member(node: Tag, page_url: str) -> TeamMember:
    links = node.select(".user-profile-link") or node.find_all("a")
    name = ""
    profile_url = ""
    for link in links:
        if not profile_url and link.get("href"):
            profile_url = absolute_url(link.get("href"), page_url) or ""
        if not name and node_text(link):
            name = node_text(link)

    image = node.find("img")
    avatar_url = absolute_url(image.get("src"), page_url) if image is not None else None
    role = node_text(node.select_one(".bubble")) or None

    return TeamMember(
        name=name or UNKNOWN_MEMBER,
        profile_url=profile_url,
        avatar_url=avatar_url,
        role=role,
    )


def extract_team_members(soup: BeautifulSoup, page_url: str) -> List[TeamMember]:
    members = []
    for node in soup.select(TEAM_MEMBER_SELECTOR):
        members.append(_safely("team member", lambda: _team_member(node, page_url), TeamMember()))
    return members


def extract_gallery_images(soup: BeautifulSoup, page_url: str) -> List[GalleryImage]:
    images = []
    seen = set()
    for link in soup.select(GALLERY_IMAGE_SELECTOR):
        # The carousel repeats its first and last slides as clones
        if link.find_parent(class_=CLONED_SLIDE_CLASS) is not None:
            continue
        url = absolute_url(link.get("href"), page_url)
        if not url or url in seen:
            continue
        seen.add(url)
        caption = node_text(link.select_one("p i")) or link.get("data-title") or None
        images.append(GalleryImage(url=url, caption=caption))
    return images


def classify_video(src: str) -> DemoVideo:
    if "youtube" in src or "youtu.be" in src:
        video_type = "youtube"
    elif "vimeo" in src:
        video_type = "vimeo"
    else:
        video_type = "other"

    parsed = urlparse(src)
    video_id = parse_qs(parsed.query).get("v", [None])[0]
    if video_id is None and video_type != "other":
        # Embed URLs carry the id as the last path segment
        segment = parsed.path.rstrip("/").rsplit("/", 1)[-1]
        video_id = segment if segment and segment not in ("embed", "video") else None

    return DemoVideo(url=src, type=video_type, video_id=video_id)


def extract_demo_video(soup: BeautifulSoup, page_url: str) -> Optional[DemoVideo]:
    frame = select_first(soup, VIDEO_SELECTORS)
    if frame is None:
        return None
    src = absolute_url(frame.get("src"), page_url)
    if not src:
        return None
    return classify_video(src)


def extract_engagement(soup: BeautifulSoup) -> Engagement:
    return Engagement(
        likes=parse_count(node_text(soup.select_one(LIKES_SELECTOR))),
        comments=parse_count(node_text(soup.select_one(COMMENTS_SELECTOR))),
    )


def _award_prize(node: Tag) -> Optional[str]:
    sibling = node.next_sibling
    if sibling is None:
        return None
    text = str(sibling).strip() if isinstance(sibling, NavigableString) else node_text(sibling)
    return text or None


def _award_category(node: Tag) -> str:
    for parent in node.parents:
        if not isinstance(parent, Tag):
            continue
        if any(parent.name == s or s.lstrip(".") in (parent.get("class") or []) for s in AWARD_SECTION_SELECTORS):
            heading = select_first(parent, AWARD_HEADING_SELECTORS)
            if heading is not None and node_text(heading):
                return node_text(heading)
            return "Overall"
    return "Overall"


def extract_awards(soup: BeautifulSoup) -> List[Award]:
    awards = []
    for node in soup.select(AWARD_SELECTOR):
        awards.append(Award(
            category=_award_category(node),
            place=node_text(node),
            prize=_award_prize(node),
        ))
    return awards


def extract_github_url(soup: BeautifulSoup, page_url: str) -> Optional[str]:
    link = select_first(soup, GITHUB_LINK_SELECTORS)
    if link is None:
        return None
    return absolute_url(link.get("href"), page_url)


def extract_website_url(soup: BeautifulSoup, page_url: str) -> Optional[str]:
    for link in _select_all_first(soup, SOFTWARE_LINKS_SELECTORS):
        href = absolute_url(link.get("href"), page_url)
        if href and "github.com" not in href:
            return href
    return None


def extract_project_details(html: str, page_url: str) -> ProjectDetails:
    """
    Extract the full structured record from a rendered project detail page.

    Each field is read independently and falls back to its empty value when
    the markup is missing or unexpected, so a partially matching page still
    produces a usable record.

    Args:
        html (str): The detail page HTML.
        page_url (str): URL of the page, used to resolve relative links.

    Returns:
        ProjectDetails: The extracted fields.
    """
    soup = make_soup(html)

    team_members = _safely("team members", lambda: extract_team_members(soup, page_url), [])
    details = ProjectDetails(
        description=_safely("description", lambda: extract_description(soup), None),
        technologies=_safely("technologies", lambda: extract_technologies(soup, page_url), []),
        team_members=team_members,
        team_size=len(team_members),
        gallery_images=_safely("gallery images", lambda: extract_gallery_images(soup, page_url), []),
        demo_video=_safely("demo video", lambda: extract_demo_video(soup, page_url), None),
        engagement=_safely("engagement", lambda: extract_engagement(soup), Engagement()),
        awards=_safely("awards", lambda: extract_awards(soup), []),
        github_url=_safely("GitHub URL", lambda: extract_github_url(soup, page_url), None),
        website_url=_safely("website URL", lambda: extract_website_url(soup, page_url), None),
    )

    logger.info(
        f"📊 Extracted {len(details.technologies)} technologies, {len(details.team_members)} team members, "
        f"{len(details.gallery_images)} images, {len(details.awards)} awards"
    )
    return details
