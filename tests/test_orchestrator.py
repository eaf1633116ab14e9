"""End-to-end tests for the scrape pipeline with a fake relay."""

from movie_scraper.models import ReconcileOutcome, Severity
from movie_scraper.pipeline import RunContext, ScrapeOrchestrator, build_page_url
from movie_scraper.scrapers import DetailExtractor, FetchError

LIST_URL = "https://movies.example.com/?page=1"
ALPHA_URL = "https://movies.example.com/movie/alpha"
BETA_URL = "https://movies.example.com/series/beta"

BETA_DETAIL_HTML = """
<html><body>
<h1>Beta Show</h1>
<span class="badge ep-badge added">S02</span>
<p><b>Genre:</b> Comedy</p>
<p><b>Quality:</b> 1080p</p>
</body></html>
"""


def listing_with(urls):
    cards = "".join(
        f'<div class="movie-card"><div class="image-container">'
        f'<a href="{url}"><img src="/t{i}.jpg" alt="Card {i}"></a></div></div>'
        for i, url in enumerate(urls)
    )
    return f"<html><body>{cards}</body></html>"


class Recorder:
    def __init__(self):
        self.progress = []
        self.items = []

    def on_progress(self, event):
        self.progress.append(event)

    def on_item(self, event):
        self.items.append(event)


def make_orchestrator(relay, delays):
    return ScrapeOrchestrator(fetcher=relay, card_delay=0.5, sleep=delays.append)


class TestScrapePage:
    def test_new_and_updated(self, fake_relay, listing_html, detail_html):
        existing = DetailExtractor().extract(BETA_DETAIL_HTML, BETA_URL, 3, source_url=BETA_URL)
        existing.status = "Online"
        assert existing.id == "movie3"

        relay = fake_relay(
            {LIST_URL: listing_html, ALPHA_URL: detail_html, BETA_URL: BETA_DETAIL_HTML}
        )
        delays = []
        context = RunContext(existing_data=[existing])
        recorder = Recorder()

        found = make_orchestrator(relay, delays).scrape_page(
            LIST_URL, 1, context, recorder.on_progress, recorder.on_item
        )

        assert found == 2
        assert [e.outcome for e in recorder.items] == [
            ReconcileOutcome.NEW,
            ReconcileOutcome.UPDATED,
        ]
        new_record = recorder.items[0].record
        assert new_record.id == "webseries4"
        assert new_record.title == "Alpha Movie"
        assert new_record.source_url == ALPHA_URL
        assert new_record.image_url == "https://movies.example.com/posters/alpha.jpg"
        assert new_record.quality == "720p WEB-DL"
        assert new_record.raw_language == "[Dual – Hindi English]"
        assert new_record.language == "Dual Audio, Hindi English"
        assert new_record.content_type == "Web Series"
        assert new_record.status == "S01"
        assert new_record.is_adult_flagged is False
        assert new_record.imdb_rating == "7.8/10"
        assert new_record.genre == "Action, Drama"
        assert new_record.resolution == "480p, 720p"
        assert new_record.release_info == "2024"
        assert new_record.cast == "Jane Doe, John Roe"
        assert new_record.storyline == "A hero rises."
        assert new_record.screenshot_urls == [
            "https://movies.example.com/shots/1.jpg",
            "https://cdn.example.com/shots/2.jpg",
        ]
        assert [
            (q.quality_label, q.file_size, q.resolved_url)
            for q in new_record.download_groups[0].qualities
        ] == [("720p", "1.2GB", "https://movies.example.com/getLink/abc")]
        assert context.scraped_data == [new_record]

        updated = recorder.items[1]
        assert updated.record is None
        assert updated.matched_record is existing
        assert existing.status == "S02"
        assert existing.id == "movie3"
        assert context.updated_records == [existing]

        assert len(recorder.progress) >= 3
        assert delays == [0.5, 0.5]
        assert context.cards_scraped == 1
        assert context.duplicates_skipped == 1
        assert context.updated_count == 1
        assert context.current_page == 1

    def test_duplicate(self, fake_relay):
        relay = fake_relay({LIST_URL: listing_with([BETA_URL]), BETA_URL: BETA_DETAIL_HTML})
        existing = DetailExtractor().extract(BETA_DETAIL_HTML, BETA_URL, 1)
        context = RunContext(existing_data=[existing])
        recorder = Recorder()

        make_orchestrator(relay, []).scrape_page(
            LIST_URL, 1, context, recorder.on_progress, recorder.on_item
        )

        assert recorder.items[0].outcome == ReconcileOutcome.DUPLICATE
        assert context.scraped_data == []
        assert any(
            e.severity == Severity.WARNING and "Skipped duplicate" in e.message
            for e in recorder.progress
        )

    def test_repeated_card_is_duplicate_of_in_run_record(self, fake_relay):
        relay = fake_relay(
            {LIST_URL: listing_with([BETA_URL, BETA_URL]), BETA_URL: BETA_DETAIL_HTML}
        )
        context = RunContext()
        recorder = Recorder()

        make_orchestrator(relay, []).scrape_page(LIST_URL, 1, context, on_item=recorder.on_item)

        assert [e.outcome for e in recorder.items] == [
            ReconcileOutcome.NEW,
            ReconcileOutcome.DUPLICATE,
        ]
        assert [r.id for r in context.scraped_data] == ["movie1"]

    def test_storyline_distinguishes_records(self, fake_relay, detail_html):
        gamma_url = "https://movies.example.com/movie/gamma"
        relay = fake_relay(
            {
                LIST_URL: listing_with([ALPHA_URL, gamma_url]),
                ALPHA_URL: detail_html,
                gamma_url: detail_html.replace("A hero", "A villain"),
            }
        )
        context = RunContext()

        make_orchestrator(relay, []).scrape_page(LIST_URL, 1, context)

        assert [r.storyline for r in context.scraped_data] == [
            "A hero rises.",
            "A villain rises.",
        ]
        assert context.duplicates_skipped == 0

    def test_serial_increments_only_on_new(self, fake_relay, detail_html):
        gamma_url = "https://movies.example.com/movie/gamma"
        relay = fake_relay(
            {
                LIST_URL: listing_with([BETA_URL, BETA_URL, gamma_url]),
                BETA_URL: BETA_DETAIL_HTML,
                gamma_url: detail_html,
            }
        )
        context = RunContext(existing_data=[DetailExtractor().extract("<h1>Old</h1>", BETA_URL, 5)])

        make_orchestrator(relay, []).scrape_page(LIST_URL, 1, context)

        assert [r.id for r in context.scraped_data] == ["movie6", "webseries7"]

    def test_card_failure_is_skipped(self, fake_relay, detail_html):
        relay = fake_relay(
            {
                LIST_URL: listing_with([BETA_URL, ALPHA_URL]),
                BETA_URL: FetchError("relay said no"),
                ALPHA_URL: detail_html,
            }
        )
        delays = []
        context = RunContext()
        recorder = Recorder()

        make_orchestrator(relay, delays).scrape_page(
            LIST_URL, 1, context, recorder.on_progress, recorder.on_item
        )

        assert len(recorder.items) == 1
        assert recorder.items[0].record.id == "webseries1"
        errors = [e for e in recorder.progress if e.severity == Severity.ERROR]
        assert len(errors) == 1
        assert "relay said no" in errors[0].message
        assert context.errors == 1
        assert delays == [0.5, 0.5]

    def test_failing_item_callback_is_isolated(self, fake_relay, detail_html):
        relay = fake_relay(
            {
                LIST_URL: listing_with([ALPHA_URL, BETA_URL]),
                ALPHA_URL: detail_html,
                BETA_URL: BETA_DETAIL_HTML,
            }
        )
        context = RunContext()
        recorder = Recorder()

        def on_item(event):
            if event.record.source_url == ALPHA_URL:
                raise RuntimeError("display broke")
            recorder.on_item(event)

        make_orchestrator(relay, []).scrape_page(
            LIST_URL, 1, context, recorder.on_progress, on_item
        )

        assert relay.requested == [LIST_URL, ALPHA_URL, BETA_URL]
        assert [r.id for r in context.scraped_data] == ["webseries1", "movie2"]
        assert [e.record.id for e in recorder.items] == ["movie2"]
        errors = [e for e in recorder.progress if e.severity == Severity.ERROR]
        assert len(errors) == 1
        assert "display broke" in errors[0].message
        assert context.errors == 1

    def test_page_failure(self, fake_relay):
        recorder = Recorder()
        context = RunContext()

        found = make_orchestrator(fake_relay({}), []).scrape_page(
            LIST_URL, 3, context, recorder.on_progress, recorder.on_item
        )

        assert found == 0
        assert recorder.items == []
        assert recorder.progress[-1].severity == Severity.ERROR
        assert "page 3" in recorder.progress[-1].message

    def test_zero_cards_warns(self, fake_relay):
        recorder = Recorder()
        found = make_orchestrator(fake_relay({LIST_URL: "<p>maintenance</p>"}), []).scrape_page(
            LIST_URL, 1, RunContext(), recorder.on_progress
        )

        assert found == 0
        assert any(e.severity == Severity.WARNING for e in recorder.progress)

    def test_stop_after_first_card(self, fake_relay, detail_html):
        urls = [ALPHA_URL, BETA_URL, "https://movies.example.com/movie/gamma"]
        relay = fake_relay({LIST_URL: listing_with(urls), ALPHA_URL: detail_html})
        context = RunContext()
        recorder = Recorder()

        def on_item(event):
            recorder.on_item(event)
            context.request_stop()

        make_orchestrator(relay, []).scrape_page(
            LIST_URL, 1, context, recorder.on_progress, on_item
        )

        assert len(recorder.items) == 1
        assert BETA_URL not in relay.requested
        assert relay.requested == [LIST_URL, ALPHA_URL]
        assert "Stop requested" in recorder.progress[-1].message


class TestDrivers:
    def test_build_page_url(self):
        assert build_page_url("https://movies.example.com/", 2) == (
            "https://movies.example.com/?page=2"
        )
        assert build_page_url("https://movies.example.com/?cat=hd", 2) == (
            "https://movies.example.com/?cat=hd&page=2"
        )

    def test_page_range_end_to_start(self, fake_relay):
        relay = fake_relay({})
        make_orchestrator(relay, []).scrape_page_range(
            "https://movies.example.com/", 1, 3, RunContext(), direction="end-to-start"
        )

        assert relay.requested == [
            "https://movies.example.com/?page=3",
            "https://movies.example.com/?page=2",
            "https://movies.example.com/?page=1",
        ]

    def test_page_range_honours_stop(self, fake_relay):
        relay = fake_relay({})
        context = RunContext()
        context.request_stop()

        total = make_orchestrator(relay, []).scrape_page_range(
            "https://movies.example.com/", 1, 3, context
        )

        assert total == 0
        assert relay.requested == []

    def test_scrape_links(self, fake_relay, detail_html):
        relay = fake_relay({ALPHA_URL: detail_html, BETA_URL: BETA_DETAIL_HTML})
        context = RunContext()
        recorder = Recorder()
        delays = []

        processed = make_orchestrator(relay, delays).scrape_links(
            [ALPHA_URL, "  ", BETA_URL], context, recorder.on_progress, recorder.on_item
        )

        assert processed == 2
        assert [r.id for r in context.scraped_data] == ["webseries1", "movie2"]
        assert context.scraped_data[0].source_url == ALPHA_URL
        assert delays == [0.5, 0.5]
