"""Custom exceptions for fetching, parsing and rebuilding feeds."""

class FeedServiceError(Exception):
    """Base class for all feed service errors."""
    def __init__(self, message="An error occurred while producing the feed", status_code=None):
        self.status_code = status_code
        super().__init__(message)

class FetchError(FeedServiceError):
    """Raised when the upstream feed is unreachable or answers with a non-success status."""
    def __init__(self, message="Failed to fetch upstream feed", status_code=None):
        super().__init__(message, status_code)

class ParseError(FeedServiceError):
    """Raised when the upstream body is not a well-formed feed document."""
    def __init__(self, message="Failed to parse upstream feed"):
        super().__init__(message, status_code=None)

class TransformError(FeedServiceError):
    """Raised when a parsed feed has an unexpected shape (e.g. an episode without a title)."""
    def __init__(self, message="Failed to rebuild feed"):
        super().__init__(message, status_code=None)
