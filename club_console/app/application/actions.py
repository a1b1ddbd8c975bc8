from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class BulkMode(str, Enum):
    PER_ITEM = "per_item"
    BATCH = "batch"


@dataclass(frozen=True)
class ActionKind:
    name: str
    label: str
    status: str | None = None
    removes_item: bool = False
    confirm_single: str | None = None
    confirm_bulk: str | None = None
    success_message: str | None = None
    bulk_mode: BulkMode = BulkMode.PER_ITEM

    @property
    def destructive(self) -> bool:
        return self.removes_item

    def single_prompt(self, noun: str) -> str | None:
        if self.confirm_single:
            return self.confirm_single.format(noun=noun)
        if self.destructive:
            return f"{self.label} this {noun}? This cannot be undone."
        return None

    def bulk_prompt(self, count: int, noun_plural: str) -> str | None:
        if self.confirm_bulk:
            return self.confirm_bulk.format(count=count, noun_plural=noun_plural)
        if self.destructive:
            return f"{self.label} {count} {noun_plural}? This cannot be undone."
        return None

    def success_text(self, noun: str) -> str | None:
        return self.success_message.format(noun=noun) if self.success_message else None


APPROVE = ActionKind(
    name="approve",
    label="Approve",
    status="approved",
    confirm_single="Approve this {noun}?",
    confirm_bulk="Approve {count} {noun_plural}?",
    success_message="The {noun} was approved.",
    bulk_mode=BulkMode.BATCH,
)
REJECT = ActionKind(
    name="reject",
    label="Reject",
    status="rejected",
    confirm_single="Reject this {noun}?",
    confirm_bulk="Reject {count} {noun_plural}?",
    success_message="The {noun} was rejected.",
    bulk_mode=BulkMode.BATCH,
)
DELETE = ActionKind(
    name="delete",
    label="Delete",
    removes_item=True,
    success_message="The {noun} was deleted.",
)
MARK_SEEN = ActionKind(name="mark-seen", label="Mark as seen")
RESOLVE = ActionKind(
    name="resolve",
    label="Resolve",
    status="resolved",
    success_message="The {noun} was marked resolved.",
)
UNBAN = ActionKind(
    name="unban",
    label="Unban",
    status="active",
    confirm_single="Unban this {noun}?",
    success_message="The {noun} was unbanned.",
)
