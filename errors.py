class ScraperError(Exception):
    """Base class for everything the hackathon scraper raises."""


class BrowserLaunchError(ScraperError):
    pass


class NavigationError(ScraperError):
    """The gallery page could not be loaded or answered with a non-2xx status."""

    def __init__(self, url, status=None, reason=""):
        self.url = url
        self.status = status
        message = f"Failed to load page: {url}"
        if status is not None:
            message += f" ({status} {reason})".rstrip()
        super().__init__(message)


class GalleryTimeoutError(ScraperError):
    """No project entries showed up on the gallery page in time."""


class RepositoryError(ScraperError):
    """A write to or read from the projects table failed."""


class ScrapeFailedError(ScraperError):
    """A run was aborted by a fatal error. The cause is chained."""
