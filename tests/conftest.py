"""Shared fixtures for the movie_scraper test suite."""

import sys
from pathlib import Path

import pytest

# Ensure the repo root is on the path so "import movie_scraper" works without installing.
repo_root = Path(__file__).resolve().parents[1]
if str(repo_root) not in sys.path:
    sys.path.insert(0, str(repo_root))

from movie_scraper.models import DownloadGroup, DownloadQuality, ScrapedRecord  # noqa: E402
from movie_scraper.scrapers import FetchError, FetchedPage  # noqa: E402


# ---------------------------------------------------------------------------
# Markup
# ---------------------------------------------------------------------------

LISTING_HTML = """
<html><body>
<div class="movie-card">
  <div class="image-container">
    <a href="/movie/alpha"><img src="/thumbs/alpha.jpg" alt="Alpha Movie"></a>
  </div>
</div>
<div class="movie-card">
  <span class="badge adult18plus-badge">18+</span>
  <div class="image-container">
    <a href="https://movies.example.com/series/beta"><img src="https://cdn.example.com/beta.jpg"></a>
  </div>
  <h3>Beta Show [S02 Ep 1-8 Added]</h3>
</div>
</body></html>
"""

DETAIL_HTML = """
<html><body>
<div class="mb-2 font-bold text-center text-xl">Alpha Movie [S01 Ep 1-10 Added]</div>
<h1>Ignored Heading</h1>
<div class="image-container-view"><img src="/posters/alpha.jpg"></div>
<b class="text-orange">Web Series</b>
<span class="badge ep-badge added">S01</span>
<span class="upload-time">3 hours ago</span>
<p><b>IMDb:</b> 7.8/10</p>
<p><strong>Genre:</strong>  Action,   Drama </p>
<p><b>Language:</b> [Dual – Hindi English]</p>
<p><b>Quality:</b> 720p WEB-DL</p>
<p><b>Resolution:</b> 480p, 720p</p>
<p><b>Released:</b> 2024</p>
<p><b>Cast:</b> Jane Doe, John Roe</p>
<div class="storyline-box mt-2"><div class="story-text">  A hero
   rises. </div></div>
<div class="screenshot-wrapper">
  <img data-src="/shots/1.jpg">
  <img data-src="">
  <img data-src="https://cdn.example.com/shots/2.jpg">
</div>
<div class="d-flex justify-content-center align-items-center my-2">
  <div class="d-flex flex-wrap justify-content-center align-items-center gap-2 gap-md-3 my-2">
    <a href="/getLink/abc">Download [720p • 1.2GB]</a>
    <a href="/getLink/xyz">Watch Online</a>
    <a href="/other/abc">Download [1080p • 2GB]</a>
  </div>
</div>
</body></html>
"""

MINIMAL_DETAIL_HTML = "<html><body><h1>Bare Title</h1></body></html>"


# ---------------------------------------------------------------------------
# Fakes
# ---------------------------------------------------------------------------

class FakeRelay:
    """Relay stand-in keyed by URL; values are html strings or exceptions."""

    def __init__(self, pages):
        self.pages = dict(pages)
        self.requested = []

    def fetch_page(self, url):
        self.requested.append(url)
        page = self.pages.get(url)
        if page is None:
            raise FetchError(f"No page for {url}")
        if isinstance(page, Exception):
            raise page
        return FetchedPage(html=page, final_url=url, status=200)


def make_record(**overrides) -> ScrapedRecord:
    fields = dict(
        id="movie1",
        source_url="https://movies.example.com/movie/one",
        title="One",
        image_url="https://movies.example.com/one.jpg",
        quality="720p",
        language="Hindi",
        raw_language="Hindi",
        content_type="Movie",
        status="Online",
        genre="Drama",
        resolution="720p",
        release_info="2023",
        cast="A, B",
        storyline="Story.",
        download_groups=[
            DownloadGroup(
                qualities=[DownloadQuality("720p", "1GB", "https://movies.example.com/getLink/1")]
            )
        ],
    )
    fields.update(overrides)
    return ScrapedRecord(**fields)


@pytest.fixture
def fake_relay():
    return FakeRelay


@pytest.fixture
def record_factory():
    return make_record


@pytest.fixture
def listing_html():
    return LISTING_HTML


@pytest.fixture
def detail_html():
    return DETAIL_HTML


@pytest.fixture
def minimal_detail_html():
    return MINIMAL_DETAIL_HTML
