"""
HTTP utilities for Newsdesk.
"""

JSON_HEADERS = {
    'Content-Type': 'application/json',
    'Accept': 'application/json',
}


def is_success(status: int) -> bool:
    """True for 2xx status codes."""
    return 200 <= status < 300
