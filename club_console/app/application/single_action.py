from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any

from club_console.app.application.actions import ActionKind
from club_console.app.application.data_service import DataService
from club_console.app.application.errors import ActionError, ValidationError
from club_console.app.domain.models.collection import detail_key, list_prefix, stats_key
from club_console.app.infrastructure.errors.error_mapper import ErrorMapper
from club_console.app.infrastructure.logging.logger import get_logger, log_action
from club_console.app.listing_cache import ListingCache
from club_console.app.screens import ScreenDefinition
from club_console.app.ui.components.confirmation import ConfirmationGate
from club_console.app.ui.components.notifier import Notifier
from club_console.app.ui.selection import SelectionSetManager

SUCCEEDED = "succeeded"
FAILED = "failed"
CANCELLED = "cancelled"
INVALID = "invalid"


@dataclass(frozen=True)
class ActionOutcome:
    action: str
    item_id: str
    status: str
    error: Exception | None = None
    response: dict[str, Any] | None = None

    @property
    def ok(self) -> bool:
        return self.status == SUCCEEDED


def invalidate_after_mutation(cache: ListingCache, resource: str, item_ids: Iterable[str] = ()) -> None:
    cache.invalidate_prefix(list_prefix(resource))
    cache.invalidate_prefix(stats_key(resource))
    for item_id in item_ids:
        cache.invalidate_prefix(detail_key(resource, item_id))


async def dispatch_action(service: DataService, item_id: str, action: ActionKind) -> dict[str, Any]:
    if action.removes_item:
        return await service.remove_single(item_id)
    return await service.mutate_single(item_id, action.name)


class SingleActionExecutor:
    def __init__(
        self,
        screen: ScreenDefinition,
        service: DataService,
        cache: ListingCache,
        selection: SelectionSetManager,
        notifier: Notifier,
        confirm: ConfirmationGate,
        logger: logging.Logger | None = None,
    ) -> None:
        self.screen = screen
        self.service = service
        self.cache = cache
        self.selection = selection
        self.notifier = notifier
        self.confirm = confirm
        self.logger = logger or get_logger("club_console.actions")

    async def execute(self, item_id: str, action: ActionKind | str) -> ActionOutcome:
        kind = action if isinstance(action, ActionKind) else self.screen.action(action)
        item_id = (item_id or "").strip()
        if not item_id:
            error = ValidationError(f"Select a {self.screen.noun} before running '{kind.label}'.")
            self.notifier.error(error.message)
            self._log(kind, item_id, INVALID)
            return ActionOutcome(action=kind.name, item_id=item_id, status=INVALID, error=error)

        prompt = kind.single_prompt(self.screen.noun)
        if prompt is not None and not self.confirm(prompt):
            self._log(kind, item_id, CANCELLED)
            return ActionOutcome(action=kind.name, item_id=item_id, status=CANCELLED)

        try:
            response = await dispatch_action(self.service, item_id, kind)
        except ActionError as error:
            self.notifier.error(ErrorMapper.to_display_message(error))
            self._log(kind, item_id, FAILED, trace_id=error.trace_id, code=error.code)
            return ActionOutcome(action=kind.name, item_id=item_id, status=FAILED, error=error)

        if kind.removes_item:
            self.selection.toggle(item_id, False)
        invalidate_after_mutation(self.cache, self.screen.resource, [item_id])
        message = kind.success_text(self.screen.noun)
        if message:
            self.notifier.success(message)
        self._log(kind, item_id, SUCCEEDED)
        return ActionOutcome(action=kind.name, item_id=item_id, status=SUCCEEDED, response=response)

    def _log(self, kind: ActionKind, item_id: str, outcome: str, trace_id: str | None = None, **fields: Any) -> None:
        log_action(
            self.logger,
            module=self.screen.resource,
            action=kind.name,
            outcome=outcome,
            trace_id=trace_id,
            item_id=item_id,
            **fields,
        )
