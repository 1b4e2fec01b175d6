"""
Upstream content clients
"""

from .hackernews_client import HackerNewsClient, Story

__all__ = ["HackerNewsClient", "Story"]
