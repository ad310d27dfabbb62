import re
from typing import Iterable, Optional
from urllib.parse import urljoin

from bs4 import BeautifulSoup, Comment, Tag

_COUNT_RE = re.compile(r"-?\d[\d,]*")


def make_soup(html: str) -> BeautifulSoup:
    return BeautifulSoup(html or "", "html.parser")


def select_first(node: Tag, selectors: Iterable[str]) -> Optional[Tag]:
    """
    Return the first element matched by the first selector that matches anything.

    Args:
        node (Tag): The element (or document) to search under.
        selectors (Iterable[str]): CSS selectors in priority order.

    Returns:
        Optional[Tag]: The matched element, or None if no selector matched.
    """
    for selector in selectors:
        found = node.select_one(selector)
        if found is not None:
            return found
    return None


def node_text(node: Optional[Tag]) -> str:
    if node is None:
        return ""
    return node.get_text().strip()


def first_line(text: str) -> str:
    """Devpost renders the title and description in the same node, keep only the title."""
    return text.strip().split("\n")[0].strip()


def absolute_url(href: Optional[str], base_url: str) -> Optional[str]:
    if not href or not href.strip():
        return None
    href = href.strip()
    if href.startswith("//"):
        return "https:" + href
    return urljoin(base_url, href)


def parse_count(text: Optional[str]) -> int:
    """Parse a counter like '1,204' into an int. Anything unparseable counts as 0."""
    if not text:
        return 0
    match = _COUNT_RE.search(text)
    if not match:
        return 0
    try:
        value = int(match.group(0).replace(",", ""))
    except ValueError:
        return 0
    return max(value, 0)


def slugify(value: str) -> str:
    slug = re.sub(r"\s+", "-", value.strip().lower())
    slug = re.sub(r"[^a-z0-9\-_]", "", slug)
    return slug or "untitled"


def sanitize_html(fragment: Tag, keep_root: bool = False) -> str:
    """
    Clean a description container while keeping its semantic markup.

    By default only the contents of `fragment` are returned. With
    `keep_root` the element itself is kept too, which is what a bare
    `<h2>` or `<p>` sibling in the article body needs.

    Drops script/style tags and HTML comments, strips class, id and data-*
    attributes, and removes paragraphs with no text and no media.
    """
    soup = make_soup(str(fragment))
    for tag in soup.find_all(["script", "style"]):
        tag.decompose()
    for comment in soup.find_all(string=lambda s: isinstance(s, Comment)):
        comment.extract()
    for tag in soup.find_all(True):
        for attr in list(tag.attrs):
            if attr in ("class", "id") or attr.startswith("data-"):
                del tag.attrs[attr]
    for paragraph in soup.find_all("p"):
        if not paragraph.get_text(strip=True) and paragraph.find(["img", "iframe", "video"]) is None:
            paragraph.decompose()

    root = soup.find(True)
    if root is None:
        return ""
    if keep_root:
        if not root.get_text(strip=True) and root.find(["img", "iframe", "video"]) is None:
            return ""
        return str(root).strip()
    return root.decode_contents().strip()
