"""Custom exceptions for the harvester domain."""


class HarvesterError(Exception):
    """Base exception for this project."""


class ConfigError(HarvesterError):
    """Raised when runtime configuration is invalid."""


class ValidationError(HarvesterError):
    """Raised when a crawl is started with bad parameters."""


class ExtractionError(HarvesterError):
    """Raised when scanning a page for emails fails."""


class NavigationError(HarvesterError):
    """Raised when a tab cannot be navigated or never finishes loading."""


class MessagingError(HarvesterError):
    """Raised when the extractor does not answer an extraction request."""


class PersistenceError(HarvesterError):
    """Raised when the session store cannot be read or written."""


class BrowserError(HarvesterError):
    """Raised when the browser surface cannot be started."""
