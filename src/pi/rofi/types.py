"""Core type definitions for pi-rofi."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass
class Option:
    """One selectable menu row.

    ``value`` is the stable identity used for history matching; ``cmds``
    is the ordered list of actions the row offers, selected by index.
    """

    name: str = ""
    value: str = ""
    cmds: list[str] = field(default_factory=list)
    category: str = ""
    icon: str = ""
    is_multiline: bool = False
    use_markup: bool = False
    is_urgent: bool = False
    is_highlighted: bool = False

    def is_printable(self) -> bool:
        return bool(self.name) and len(self.cmds) > 0

    def display_text(self) -> str:
        """Name with the category appended (after a CR for multiline rows)."""
        if not self.category:
            return self.name
        separator = "\r" if self.is_multiline else " "
        return f"{self.name}{separator}{self.category}"

    def payload(self, separator: str) -> str:
        return separator.join([self.value, *self.cmds])


@dataclass
class Value:
    """A resolved selection: the chosen row's identity and the invoked command."""

    cmd: str
    value: str


@dataclass
class Model:
    """Blocks-mode screen state, owned by the host application."""

    message: str = ""
    overlay: str = ""
    prompt: str = ""
    input: str = ""
    input_action: str = ""
    active_entry: int = 0
    options: list[Option] = field(default_factory=list)
