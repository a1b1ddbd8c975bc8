from __future__ import annotations

from collections.abc import Iterable, Sequence

from club_console.app.domain.models.collection import Entity, SelectionState, entity_id


class SelectionSetManager:
    """Cross-page multi-select state of one list view.

    ``select_all_on_page`` is derived from the ids of the current page only, never
    from the whole selection.
    """

    def __init__(self) -> None:
        self._selected: set[str] = set()
        self._page_ids: list[str] = []
        self._page_key: str | None = None
        self._select_all_on_page = False

    @property
    def selected_ids(self) -> frozenset[str]:
        return frozenset(self._selected)

    @property
    def select_all_on_page(self) -> bool:
        return self._select_all_on_page

    @property
    def page_ids(self) -> list[str]:
        return list(self._page_ids)

    def state(self) -> SelectionState:
        return SelectionState(selected_ids=self.selected_ids, select_all_on_page=self._select_all_on_page)

    def toggle(self, item_id: str, selected: bool) -> None:
        if selected:
            self._selected.add(item_id)
        else:
            self._selected.discard(item_id)
        self._recompute()

    def toggle_all_on_page(self, selected: bool) -> None:
        if selected:
            self._selected.update(self._page_ids)
        else:
            self._selected.difference_update(self._page_ids)
        self._recompute()

    def discard(self, item_ids: Iterable[str]) -> None:
        self._selected.difference_update(item_ids)
        self._recompute()

    def clear(self) -> None:
        self._selected.clear()
        self._select_all_on_page = False

    def reconcile(self, items: Sequence[Entity], page_key: str | None = None) -> None:
        ids = [entity_id(item) for item in items]
        same_page = page_key is None or page_key == self._page_key
        if page_key is not None:
            self._page_key = page_key
        if not ids:
            self._page_ids = []
            self.clear()
            return
        carry_select_all = self._select_all_on_page and same_page
        self._page_ids = ids
        if carry_select_all:
            self._selected.update(ids)
        self._recompute()

    def _recompute(self) -> None:
        self._select_all_on_page = bool(self._page_ids) and all(item_id in self._selected for item_id in self._page_ids)
