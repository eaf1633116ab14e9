"""Configuration for the movie listing scraper."""

# Relay (CORS proxy) that performs the real outbound request
DEFAULT_PROXY_URL = "https://mobile-scraper-proxy.saimakanddo.workers.dev/"
REQUEST_TIMEOUT = 30  # seconds
MAX_REDIRECTS = 20

# Outbound identification the relay uses when fetching the target site
MOBILE_USER_AGENT = (
    "Mozilla/5.0 (iPhone; CPU iPhone OS 14_0 like Mac OS X) "
    "AppleWebKit/605.1.15 (KHTML, like Gecko) "
    "Version/14.0 Mobile/15E148 Safari/604.1"
)

# Pause after every card (seconds)
CARD_DELAY_SECONDS = 0.5

# Page-range driving
PAGE_QUERY_PARAM = "page"
DIRECTION_START_TO_END = "start-to-end"
DIRECTION_END_TO_START = "end-to-start"

# Merge position of new records in the saved dataset
MERGE_APPEND = "append"
MERGE_PREPEND = "prepend"

# Listing page
CARD_SELECTORS = ".movie-card, .post, article, .item-list"
ADULT_BADGE_SELECTOR = ".badge.adult18plus-badge"
ADULT_BADGE_CLASS = "adult18plus-badge"
CARD_LINK_SELECTOR = ".image-container a"
CARD_TITLE_SELECTORS = ".mb-2.font-bold, .card-title, h3, h2"

# Detail page, most specific selector first
TITLE_SELECTORS = [
    ".mb-2.font-bold.text-center.text-xl",
    "h1",
    ".post-title",
    ".md\\:text-3xl",
    ".lg\\:text-4xl",
    ".entry-title",
]
IMAGE_SELECTORS = [
    ".image-container-view img",
    ".post-thumbnail img",
]
STORYLINE_SELECTORS = [
    ".storyline-box.mt-2 .story-text",
    ".storyline-box .story-text",
    ".story-text",
]
SCREENSHOT_SELECTOR = ".screenshot-wrapper [data-src]"
STATUS_SELECTOR = ".badge.ep-badge.added"
UPLOAD_TIME_SELECTOR = ".upload-time"

# The site ships two different containers for the download buttons
DOWNLOAD_LINK_SELECTORS = [
    ".d-flex.justify-content-center.align-items-center.my-2 "
    ".d-flex.flex-wrap.justify-content-center.align-items-center.gap-2.gap-md-3.my-2 "
    "a[href*='/getLink/']",
    ".card.h-100.border-left-success.shadow-sm.position-relative "
    ".mb-2.d-flex.justify-content-center a[href*='/getLink/']",
]
DEFAULT_SERVER_LABEL = "G-Drive"

# Bold labels on the detail page info lines
INFO_LABELS = {
    "imdb_rating": "IMDb",
    "genre": "Genre",
    "language": "Language",
    "quality": "Quality",
    "resolution": "Resolution",
    "release_info": "Released",
    "cast": "Cast",
}

# Record defaults
DEFAULT_CONTENT_TYPE = "Movie"
DEFAULT_STATUS = "Online"
DEFAULT_VISIBILITY = "published"
DEFAULT_BLUR_PERCENTAGE = 10
