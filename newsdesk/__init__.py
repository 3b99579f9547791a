"""
Newsdesk - client layer for the news aggregator

Sanitizes search and keyword input, talks to the remote news service and
keeps the locally persisted saved-articles and reading-history collections.
"""

__version__ = "0.1.0"
