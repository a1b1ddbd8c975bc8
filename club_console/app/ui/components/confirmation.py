from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field

ConfirmationGate = Callable[[str], bool]

_YES = {"y", "yes", "s", "si"}


def console_confirm(message: str, input_fn: Callable[[str], str] = input) -> bool:
    answer = input_fn(f"{message} [y/N]: ").strip().lower()
    return answer in _YES


@dataclass
class StaticConfirmation:
    answer: bool = True
    prompts: list[str] = field(default_factory=list)

    def __call__(self, message: str) -> bool:
        self.prompts.append(message)
        return self.answer
