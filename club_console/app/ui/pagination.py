from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field

from club_console.app.domain.models.collection import PageResult


ADOPTION_HISTORY = 10


@dataclass(frozen=True)
class PageAdoption:
    requested_page: int
    server_page: int
    total_pages: int


@dataclass
class PageStateSynchronizer:
    """Adopts the page the server actually returned when it differs from the one requested.

    Adoption only updates local state to match data already fetched; callers must
    not issue a new request for the adopted page. Once the caller's page equals the
    server page, later reconciles of the same response return ``None``. Only the
    most recent ``ADOPTION_HISTORY`` adoptions are kept.
    """

    adoptions: deque[PageAdoption] = field(default_factory=lambda: deque(maxlen=ADOPTION_HISTORY))

    def reconcile(self, requested_page: int, result: PageResult) -> int | None:
        server_page = max(1, result.page)
        if server_page == requested_page:
            return None
        self.adoptions.append(
            PageAdoption(requested_page=requested_page, server_page=server_page, total_pages=result.total_pages)
        )
        return server_page

    @property
    def last_adoption(self) -> PageAdoption | None:
        return self.adoptions[-1] if self.adoptions else None


def next_page(page: int, total_pages: int | None) -> int:
    if total_pages is not None and page >= total_pages:
        return page
    return page + 1


def prev_page(page: int) -> int:
    return max(1, page - 1)


def goto_page(page: int, total_pages: int | None = None) -> int:
    target = max(1, page)
    if total_pages is not None:
        target = min(target, max(1, total_pages))
    return target
