from __future__ import annotations

from dataclasses import dataclass, field

from club_console.app.application.actions import APPROVE, DELETE, MARK_SEEN, REJECT, RESOLVE, UNBAN, ActionKind
from club_console.app.application.errors import ValidationError


@dataclass(frozen=True)
class ScreenDefinition:
    resource: str
    noun: str
    noun_plural: str
    statuses: tuple[str, ...] = ("all",)
    actions: dict[str, ActionKind] = field(default_factory=dict)
    sort_fields: tuple[str, ...] = ("createdAt",)
    mark_seen_on_open: bool = False
    export_headers: tuple[str, ...] = ("id", "status", "createdAt")

    def action(self, name: str) -> ActionKind:
        try:
            return self.actions[name]
        except KeyError as exc:
            raise KeyError(f"Unknown action '{name}' for {self.resource}") from exc

    def check_status(self, status: str | None) -> None:
        value = (status or "").strip()
        if value and value not in self.statuses and value.lower() != "all":
            raise ValidationError(f"Unknown status '{value}' for {self.resource}")

    def check_sort_field(self, sort_by: str | None) -> None:
        value = (sort_by or "").strip()
        if value and value not in self.sort_fields:
            raise ValidationError(f"Cannot sort {self.resource} by '{value}'")


def _actions(*kinds: ActionKind) -> dict[str, ActionKind]:
    return {kind.name: kind for kind in kinds}


APPLICATIONS = ScreenDefinition(
    resource="applications",
    noun="application",
    noun_plural="application(s)",
    statuses=("all", "pending", "approved", "rejected"),
    actions=_actions(APPROVE, REJECT, DELETE, MARK_SEEN),
    sort_fields=("createdAt", "fullName", "status", "LpuId"),
    mark_seen_on_open=True,
    export_headers=("fullName", "LpuId", "email", "phone", "course", "status", "createdAt"),
)

CONTACTS = ScreenDefinition(
    resource="contacts",
    noun="contact",
    noun_plural="contact(s)",
    statuses=("all", "pending", "resolved"),
    actions=_actions(RESOLVE, DELETE),
    export_headers=("name", "email", "subject", "status", "createdAt"),
)

MEMBERS = ScreenDefinition(
    resource="members",
    noun="member",
    noun_plural="member(s)",
    statuses=("all", "active", "banned", "removed"),
    actions=_actions(DELETE, UNBAN),
    sort_fields=("createdAt", "fullname"),
    export_headers=("fullname", "email", "department", "designation", "status"),
)

SCREENS: dict[str, ScreenDefinition] = {
    screen.resource: screen for screen in (APPLICATIONS, CONTACTS, MEMBERS)
}


def get_screen(resource: str) -> ScreenDefinition:
    try:
        return SCREENS[resource]
    except KeyError as exc:
        raise KeyError(f"Unknown screen '{resource}'") from exc
