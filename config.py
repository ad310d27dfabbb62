# config.py
import os

from dotenv import load_dotenv

load_dotenv()


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


# Supabase connection
SUPABASE_URL = os.getenv("SUPABASE_URL")
SUPABASE_KEY = os.getenv("SUPABASE_KEY")
# For admin operations that need to bypass RLS policies
SUPABASE_SERVICE_KEY = os.getenv("SUPABASE_SERVICE_KEY")
PROJECTS_TABLE = os.getenv("PROJECTS_TABLE", "hackathon_projects")

# Browser configuration
HEADLESS = _env_bool("HEADLESS", True)
VIEWPORT = {"width": 1920, "height": 1080}
USER_AGENT = os.getenv(
    "USER_AGENT",
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36",
)
BROWSER_ARGS = ["--no-sandbox"]
GALLERY_TIMEOUT_MS = int(os.getenv("GALLERY_TIMEOUT_MS", "60000"))  # 60 seconds
DETAIL_TIMEOUT_MS = int(os.getenv("DETAIL_TIMEOUT_MS", "60000"))

# Run configuration
DEBUG_ROOT = os.getenv("DEBUG_ROOT", "debug")
BATCH_DELAY_SECONDS = float(os.getenv("BATCH_DELAY_SECONDS", "1.0"))
DEFAULT_LIMIT = 30  # Winners per hackathon when running a batch
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
API_HOST = os.getenv("API_HOST", "127.0.0.1")
API_PORT = int(os.getenv("API_PORT", "8000"))

# Devpost markup. These lists are tried in order and get updated whenever
# Devpost changes its gallery or project pages.
GALLERY_PATH = "/project-gallery"
GALLERY_ENTRY_SELECTORS = [".software-entry", ".gallery-item"]
ENTRY_TITLE_SELECTORS = ["h5", ".software-entry-name"]
ENTRY_TAGLINE_SELECTORS = ["p.tagline", ".software-entry-description", "p"]
ENTRY_LINK_SELECTORS = ["a.link-to-software", "a.block-wrapper-link", 'a[href*="/software/"]']
ENTRY_THUMBNAIL_SELECTORS = ["img.software_thumbnail_image", "figure img", "img"]
WINNER_BADGE_SELECTORS = [
    ".winner-badge",
    ".winner",
    ".winner-banner",
    "aside.entry-badge img.winner",
    '[class*="winner"]',
]

DESCRIPTION_GALLERY_ID = "gallery"
DESCRIPTION_BUILT_WITH_ID = "built-with"
DESCRIPTION_SELECTORS = [
    "#app-details .content-section",
    "#software-description",
    ".software-description",
    "#app-details-left",
]
TECHNOLOGY_SELECTORS = ["#built-with .cp-tag", ".built-with-list li", ".cp-tag"]
RECOGNIZED_TECH_CLASS = "recognized-tag"
TEAM_MEMBER_SELECTOR = ".software-team-member"
GALLERY_IMAGE_SELECTOR = "#gallery .slick-slide:not(.slick-cloned) a[data-lightbox], #gallery a[data-lightbox]"
CLONED_SLIDE_CLASS = "slick-cloned"
VIDEO_SELECTORS = ["iframe.video-embed", ".video-embed iframe", "#gallery iframe"]
LIKES_SELECTOR = ".software-likes .side-count"
COMMENTS_SELECTOR = ".comment-button .side-count"
AWARD_SELECTOR = ".software-list-content .winner"
AWARD_SECTION_SELECTORS = ["section", ".category-section"]
AWARD_HEADING_SELECTORS = ["h1", "h2", "h3", ".category-name"]
GITHUB_LINK_SELECTORS = [
    '.app-links a[href*="github.com"]',
    '[data-role="software-urls"] a[href*="github.com"]',
    'a[href*="github.com"]',
]
SOFTWARE_LINKS_SELECTORS = ['[data-role="software-urls"] a', ".app-links a"]
