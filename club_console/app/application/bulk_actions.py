from __future__ import annotations

import asyncio
import logging
from collections.abc import Iterable
from dataclasses import dataclass

from club_console.app.application.actions import ActionKind, BulkMode
from club_console.app.application.data_service import DataService
from club_console.app.application.errors import ActionError, BulkPartialFailure
from club_console.app.application.single_action import dispatch_action, invalidate_after_mutation
from club_console.app.infrastructure.errors.error_mapper import ErrorMapper
from club_console.app.infrastructure.logging.logger import get_logger, log_action
from club_console.app.listing_cache import ListingCache
from club_console.app.screens import ScreenDefinition
from club_console.app.ui.components.confirmation import ConfirmationGate
from club_console.app.ui.components.notifier import Notifier
from club_console.app.ui.selection import SelectionSetManager


@dataclass(frozen=True)
class ItemOutcome:
    item_id: str
    error: Exception | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass(frozen=True)
class BulkActionResult:
    action: str
    results: tuple[ItemOutcome, ...] = ()

    @property
    def attempted(self) -> list[str]:
        return [outcome.item_id for outcome in self.results]

    @property
    def succeeded(self) -> list[str]:
        return [outcome.item_id for outcome in self.results if outcome.ok]

    @property
    def failed(self) -> list[tuple[str, Exception]]:
        return [(outcome.item_id, outcome.error) for outcome in self.results if outcome.error is not None]

    @property
    def all_succeeded(self) -> bool:
        return bool(self.results) and not self.failed

    @property
    def all_failed(self) -> bool:
        return bool(self.results) and not self.succeeded

    @property
    def is_partial(self) -> bool:
        return bool(self.succeeded) and bool(self.failed)

    @property
    def outcome(self) -> str:
        if self.all_succeeded:
            return "success"
        if self.is_partial:
            return "partial"
        return "failed"

    def summary(self) -> dict[str, int]:
        return {"total": len(self.results), "success": len(self.succeeded), "failed": len(self.failed)}

    def raise_for_failures(self) -> None:
        if self.is_partial:
            failed_ids = ", ".join(item_id for item_id, _ in self.failed)
            raise BulkPartialFailure(
                f"{self.action}: {len(self.failed)} of {len(self.results)} failed ({failed_ids})",
                result=self,
            )
        if self.all_failed:
            first_error = self.failed[0][1]
            api_error = first_error.api_error if isinstance(first_error, ActionError) else None
            raise ActionError(f"{self.action} failed for all {len(self.results)} items", api_error=api_error)


class BulkActionExecutor:
    def __init__(
        self,
        screen: ScreenDefinition,
        service: DataService,
        cache: ListingCache,
        selection: SelectionSetManager,
        notifier: Notifier,
        confirm: ConfirmationGate,
        concurrency: int = 5,
        logger: logging.Logger | None = None,
    ) -> None:
        self.screen = screen
        self.service = service
        self.cache = cache
        self.selection = selection
        self.notifier = notifier
        self.confirm = confirm
        self.concurrency = max(1, concurrency)
        self.logger = logger or get_logger("club_console.bulk_actions")

    async def execute(self, item_ids: Iterable[str], action: ActionKind | str) -> BulkActionResult | None:
        kind = action if isinstance(action, ActionKind) else self.screen.action(action)
        ids = list(dict.fromkeys(item_id for item_id in item_ids if item_id))
        if not ids:
            self.notifier.error(f"No {self.screen.noun_plural} selected.")
            log_action(self.logger, module=self.screen.resource, action=f"bulk-{kind.name}", outcome="nothing_selected")
            return None

        prompt = kind.bulk_prompt(len(ids), self.screen.noun_plural)
        if prompt is not None and not self.confirm(prompt):
            log_action(self.logger, module=self.screen.resource, action=f"bulk-{kind.name}", outcome="cancelled", total=len(ids))
            return None

        try:
            if kind.bulk_mode is BulkMode.BATCH and kind.status:
                outcomes = await self._run_batch(ids, kind.status)
            else:
                outcomes = await self._run_per_item(ids, kind)
        finally:
            # remote state may have changed even when calls failed or were interrupted
            invalidate_after_mutation(self.cache, self.screen.resource)
            self.selection.clear()

        result = BulkActionResult(action=kind.name, results=tuple(outcomes))
        self._notify(kind, result)
        log_action(
            self.logger,
            module=self.screen.resource,
            action=f"bulk-{kind.name}",
            outcome=result.outcome,
            failed_ids=[item_id for item_id, _ in result.failed],
            **result.summary(),
        )
        return result

    async def _run_batch(self, ids: list[str], status: str) -> list[ItemOutcome]:
        try:
            await self.service.mutate_bulk_status(ids, status)
        except ActionError as error:
            # atomicity of the batch endpoint is unknown: every id is reported failed
            return [ItemOutcome(item_id=item_id, error=error) for item_id in ids]
        return [ItemOutcome(item_id=item_id) for item_id in ids]

    async def _run_per_item(self, ids: list[str], kind: ActionKind) -> list[ItemOutcome]:
        semaphore = asyncio.Semaphore(self.concurrency)

        async def _run_one(item_id: str) -> ItemOutcome:
            async with semaphore:
                try:
                    await dispatch_action(self.service, item_id, kind)
                except ActionError as error:
                    return ItemOutcome(item_id=item_id, error=error)
                return ItemOutcome(item_id=item_id)

        return list(await asyncio.gather(*(_run_one(item_id) for item_id in ids)))

    def _notify(self, kind: ActionKind, result: BulkActionResult) -> None:
        noun_plural = self.screen.noun_plural
        total = len(result.results)
        if result.all_succeeded:
            self.notifier.success(f"Bulk {kind.label.lower()} completed for {total} {noun_plural}.")
            return
        failed_ids = ", ".join(item_id for item_id, _ in result.failed)
        first_error = ErrorMapper.to_display_message(result.failed[0][1])
        if result.is_partial:
            self.notifier.error(
                f"Bulk {kind.label.lower()} partially failed: {len(result.succeeded)} of {total} "
                f"{noun_plural} succeeded; failed: {failed_ids}. {first_error}"
            )
            return
        self.notifier.error(f"Bulk {kind.label.lower()} failed for all {total} {noun_plural}. {first_error}")
