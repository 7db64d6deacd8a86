class TopReposException(Exception):
    """Base exception for all top repositories errors."""
    pass

class NetworkError(TopReposException):
    """Raised when the request to GitHub fails at the transport level."""
    pass

class ApiError(TopReposException):
    """Raised when the GitHub search API answers with a non-200 status."""
    def __init__(self, status: int, reason: str = "GitHub API request failed."):
        self.status = status
        self.reason = reason
        super().__init__(f"GitHub API returned {status}: {reason}")
