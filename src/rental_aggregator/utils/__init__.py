from .http import HttpClient
from .logging import setup_logging
from .retry import retry_with_backoff

__all__ = ["HttpClient", "setup_logging", "retry_with_backoff"]
