import json
from datetime import datetime, timezone

import pytest

from tests.fakes import FakePage
from utils.diagnostics import DebugArtifacts, NullDiagnostics, run_timestamp
from utils.html_utils import absolute_url, first_line, make_soup, parse_count, sanitize_html, slugify
from utils.project_utils import save_projects_to_csv


@pytest.mark.parametrize("text,expected", [
    ("12", 12),
    ("1,204", 1204),
    (" 7 likes ", 7),
    ("", 0),
    (None, 0),
    ("n/a", 0),
    ("-3", 0),
])
def test_parse_count(text, expected):
    assert parse_count(text) == expected


def test_first_line():
    assert first_line("  Alpha\nA tool that does things\n") == "Alpha"
    assert first_line("Solo") == "Solo"


def test_absolute_url():
    base = "https://devpost.com/software/alpha"
    assert absolute_url("/ada", base) == "https://devpost.com/ada"
    assert absolute_url("//cdn.devpost.com/a.png", base) == "https://cdn.devpost.com/a.png"
    assert absolute_url("https://github.com/x", base) == "https://github.com/x"
    assert absolute_url("", base) is None
    assert absolute_url(None, base) is None


def test_slugify():
    assert slugify("Hack the North 2024") == "hack-the-north-2024"
    assert slugify("nwHacks: 2024!") == "nwhacks-2024"
    assert slugify("   ") == "untitled"


def test_sanitize_html_keeps_semantic_markup():
    node = make_soup(
        '<div class="x"><h3 id="a">How</h3><p data-id="1" class="y">Uses <a href="/z" class="l">links</a></p>'
        '<p></p><script>evil()</script><ul><li>one</li></ul></div>'
    ).div
    assert sanitize_html(node) == '<h3>How</h3><p>Uses <a href="/z">links</a></p><ul><li>one</li></ul>'


def test_sanitize_html_can_keep_the_element_itself():
    soup = make_soup('<p class="lead" data-x="1">Hi <em>there</em></p><p> </p>')
    first, empty = soup.find_all("p")
    assert sanitize_html(first, keep_root=True) == "<p>Hi <em>there</em></p>"
    assert sanitize_html(empty, keep_root=True) == ""


def test_run_timestamp_is_filesystem_safe():
    stamp = run_timestamp(datetime(2025, 1, 2, 3, 4, 5, 678000, tzinfo=timezone.utc))
    assert stamp == "2025-01-02T03-04-05-678Z"
    assert ":" not in run_timestamp() and "." not in run_timestamp()


async def test_debug_artifacts_write_files(tmp_path):
    artifacts = DebugArtifacts(str(tmp_path), "Hack the North 2024", timestamp="run")
    page = FakePage("https://x.devpost.com/project-gallery", "<html>gallery</html>")

    await artifacts.screenshot(page, "initial-load.png")
    await artifacts.dump_html(page, "page-content.html")
    artifacts.write_json("winning-projects.json", [{"title": "Alpha"}])

    run_dir = tmp_path / "hack-the-north-2024" / "run"
    assert (run_dir / "initial-load.png").exists()
    assert (run_dir / "page-content.html").read_text() == "<html>gallery</html>"
    assert json.loads((run_dir / "winning-projects.json").read_text()) == [{"title": "Alpha"}]


async def test_debug_artifacts_swallow_write_failures(tmp_path):
    blocker = tmp_path / "not-a-dir"
    blocker.write_text("")
    artifacts = DebugArtifacts(str(blocker), "Hack", timestamp="run")

    await artifacts.screenshot(FakePage("u", ""), "x.png")
    await artifacts.dump_html(FakePage("u", ""), "x.html")
    artifacts.write_json("x.json", {"a": 1})


async def test_null_diagnostics_do_nothing():
    diagnostics = NullDiagnostics()
    assert await diagnostics.screenshot(FakePage("u", ""), "x.png") is None
    assert diagnostics.write_json("x.json", {}) is None
    assert diagnostics.directory == ""


def test_save_projects_to_csv(tmp_path):
    out = tmp_path / "projects.csv"
    rows = [{
        "title": "Alpha",
        "devpost_url": "https://devpost.com/software/alpha",
        "technologies": [{"name": "python"}],
        "engagement": {"likes": 1, "comments": 0},
    }]
    assert save_projects_to_csv(rows, str(out)) == 1
    text = out.read_text()
    assert text.splitlines()[0].startswith("title,tagline,devpost_url")
    assert "python" in text
    assert save_projects_to_csv([], str(tmp_path / "empty.csv")) == 0
