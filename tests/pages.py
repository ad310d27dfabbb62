"""Trimmed-down Devpost markup used by the extractor and scraper tests."""


def gallery_entry(slug: str, title: str, winner: bool, tagline: str = "") -> str:
    badge = '<aside class="entry-badge"><img class="winner" src="/winner.png"></aside>' if winner else ""
    return f"""
<div class="gallery-item">
  <a class="block-wrapper-link fade link-to-software" href="https://devpost.com/software/{slug}">
    <div class="software-entry">
      <figure><img class="software_thumbnail_image" src="//cdn.devpost.com/{slug}.png"></figure>
      <div class="entry-body">
        <h5>{title}
        A longer description that Devpost puts in the same node</h5>
        <p class="small tagline">{tagline or title + " tagline"}</p>
      </div>
      {badge}
    </div>
  </a>
</div>
"""


def gallery_page(*entries: str) -> str:
    return "<html><body><div id='submission-gallery'>" + "".join(entries) + "</div></body></html>"


# Three winners, two non-winners; alpha also appears twice
GALLERY_HTML = gallery_page(
    gallery_entry("alpha", "Alpha", True),
    gallery_entry("delta", "Delta", False),
    gallery_entry("beta", "Beta", True),
    gallery_entry("alpha", "Alpha", True),
    gallery_entry("epsilon", "Epsilon", False),
    gallery_entry("gamma", "Gamma", True),
)

# Older gallery layout: bare .software-entry cards
LEGACY_GALLERY_HTML = """
<html><body>
<div class="software-entry">
  <a href="/software/legacy-one"><span class="software-entry-name">Legacy One</span></a>
  <div class="software-entry-description">Old layout</div>
  <span class="winner-banner">Winner</span>
</div>
<div class="software-entry">
  <a href="/software/legacy-two"><span class="software-entry-name">Legacy Two</span></a>
</div>
</body></html>
"""

DETAIL_HTML = """
<html><body>
<div id="app-details-left">
  <div id="gallery"><ul>
    <li class="slick-slide slick-cloned"><a data-lightbox="gallery" href="https://images.devpost.com/3.png"><p><i>Third</i></p></a></li>
    <li class="slick-slide"><a data-lightbox="gallery" href="https://images.devpost.com/1.png"><p><i>First screen</i></p></a></li>
    <li class="slick-slide"><a data-lightbox="gallery" href="https://images.devpost.com/2.png"></a></li>
    <li class="slick-slide"><a data-lightbox="gallery" href="https://images.devpost.com/3.png"><p><i>Third</i></p></a></li>
  </ul>
  <iframe class="video-embed" src="https://www.youtube.com/embed/abc123?enablejsapi=1"></iframe>
  </div>
  <div class="story"><h2 id="inspiration">Inspiration</h2><p class="lead" data-track="x">We wanted <strong>speed</strong>.</p><p> </p><script>alert(1)</script><style>p{}</style></div>
  <div id="built-with"><h2>Built With</h2><ul class="no-bullet inline-list">
    <li><span class="cp-tag recognized-tag"><a href="https://devpost.com/software/built-with/python">python</a></span></li>
    <li><span class="cp-tag">duct-tape</span></li>
  </ul></div>
  <nav class="app-links section" data-role="software-urls"><ul>
    <li><a href="https://github.com/team/alpha">GitHub Repo</a></li>
    <li><a href="https://alpha.example.com">alpha.example.com</a></li>
  </ul></nav>
  <div id="submissions"><ul class="software-list-with-thumbnail"><li>
    <div class="software-list-content">
      <p><a href="https://deltahacks-xi.devpost.com/">DeltaHacks XI</a></p>
      <ul class="no-bullet"><li><span class="winner label radius small all-caps">Winner</span> Best Use of AI</li></ul>
    </div>
  </li></ul>
  <section class="category-section"><h3>Sponsor Prizes</h3>
    <div class="software-list-content"><span class="winner">2nd Place</span><span>$500</span></div>
  </section></div>
</div>
<section id="app-team"><ul>
  <li class="software-team-member">
    <a class="user-profile-link" href="/ada"><img src="https://avatars.devpost.com/ada.png"></a>
    <div class="row"><a class="user-profile-link" href="/ada">Ada Lovelace</a><span class="bubble">Built the backend</span></div>
  </li>
  <li class="software-team-member"><img src="https://avatars.devpost.com/anon.png"></li>
</ul></section>
<div class="software-likes"><span class="side-count">1,204</span></div>
<a class="comment-button"><span class="side-count">3</span></a>
</body></html>
"""

FALLBACK_DESCRIPTION_HTML = """
<html><body>
<div id="app-details"><div class="content-section" id="story"><p>Fallback <em>text</em></p></div></div>
</body></html>
"""

BROKEN_COUNTERS_HTML = """
<html><body>
<div class="software-likes"><span class="side-count">&mdash;</span></div>
</body></html>
"""
