from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional

__all__ = ("CacheControl",)


@dataclass
class CacheControl:
    """
    Cache policy for a response, rendered as a ``Cache-Control`` value.

    Prefer the preset constructors over building one by hand.

    Attributes:
        no_store: Prevents any caching; overrides every other setting.
        public: Whether shared caches (CDNs, proxies) may store the response.
        must_revalidate: Whether stale responses must be revalidated.
        max_age: Freshness lifetime in seconds.
        s_maxage: Freshness lifetime for shared caches in seconds.
        stale_while_revalidate: Seconds stale content may be served while
            revalidating in the background.
        stale_if_error: Seconds stale content may be served if revalidation fails.
    """

    no_store: bool = False
    public: bool = False
    must_revalidate: bool = False
    max_age: Optional[int] = None
    s_maxage: Optional[int] = None
    stale_while_revalidate: Optional[int] = None
    stale_if_error: Optional[int] = None

    @classmethod
    def public_content(cls, max_age: int = 300, max_stale_age: int = 86400) -> "CacheControl":
        """Public HTML pages: brief caching, generous stale serving."""
        return cls(
            public=True,
            max_age=max_age,
            s_maxage=max_age,
            stale_while_revalidate=max_stale_age,
            stale_if_error=max_stale_age,
        )

    @classmethod
    def public_media(cls, max_age: int = 31536000, max_stale_age: int = 31536000) -> "CacheControl":
        """Static assets that rarely change (images, CSS, fonts)."""
        return cls(
            public=True,
            max_age=max_age,
            s_maxage=max_age,
            stale_while_revalidate=max_stale_age,
            stale_if_error=max_stale_age,
        )

    @classmethod
    def private_content(cls, max_age: int = 300, max_stale_age: int = 600) -> "CacheControl":
        """User-specific pages, cached only by the user's browser."""
        return cls(
            must_revalidate=True,
            max_age=max_age,
            s_maxage=max_age,
            stale_while_revalidate=max_stale_age,
            stale_if_error=max_stale_age,
        )

    @classmethod
    def private_media(cls, max_age: int = 31536000, max_stale_age: int = 31536000) -> "CacheControl":
        return cls(
            max_age=max_age,
            s_maxage=max_age,
            stale_while_revalidate=max_stale_age,
            stale_if_error=max_stale_age,
        )

    @classmethod
    def never_cached(cls) -> "CacheControl":
        return cls(no_store=True)

    def directives(self) -> List[str]:
        # no-store short-circuits everything else
        if self.no_store:
            return ["no-store", "max-age=0"]

        value = ["public" if self.public else "private"]
        if self.must_revalidate:
            value.append("must-revalidate")
        if self.max_age is not None:
            value.append(f"max-age={self.max_age}")
        if self.s_maxage is not None:
            value.append(f"s-maxage={self.s_maxage}")
        if self.stale_while_revalidate is not None:
            value.append(f"stale-while-revalidate={self.stale_while_revalidate}")
        if self.stale_if_error is not None:
            value.append(f"stale-if-error={self.stale_if_error}")
        return value

    def __str__(self) -> str:
        return ", ".join(self.directives())
