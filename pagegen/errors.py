from __future__ import annotations


class PageGenError(Exception):
    """Base class for errors raised while building the site."""


class ConfigError(PageGenError):
    pass


class BuildAbortError(PageGenError):
    """A content document could not be read or parsed. The build stops."""


class SlugCollisionError(BuildAbortError):
    def __init__(self, slug: str, first: str, second: str):
        super().__init__(f"Slug {slug} is claimed by both {first} and {second}")
        self.slug = slug
        self.first = first
        self.second = second


class SubscriptionError(PageGenError):
    """The mailing-list call failed."""
