from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Literal

if TYPE_CHECKING:
    from .rules import PlanRule


AttrType = Literal["string", "int", "bool", "map", "list"]
Level = Literal["error", "warning"]


@dataclass
class Diagnostic:
    """A single validation or planning finding."""

    level: Level
    summary: str
    detail: str = ""
    path: str | None = None

    @property
    def is_error(self) -> bool:
        return self.level == "error"

    def __str__(self) -> str:
        loc = f"[{self.path}] " if self.path else ""
        text = f"{self.level.upper()}: {loc}{self.summary}"
        if self.detail:
            text += f" - {self.detail}"
        return text


def error(summary: str, detail: str = "", path: str | None = None) -> Diagnostic:
    return Diagnostic(level="error", summary=summary, detail=detail, path=path)


def warning(summary: str, detail: str = "", path: str | None = None) -> Diagnostic:
    return Diagnostic(level="warning", summary=summary, detail=detail, path=path)


def has_errors(diagnostics: list[Diagnostic]) -> bool:
    return any(d.is_error for d in diagnostics)


@dataclass(frozen=True)
class Attribute:
    name: str
    type: AttrType
    required: bool = False
    optional: bool = False
    computed: bool = False
    sensitive: bool = False
    deprecated: str | None = None
    description: str = ""
    rules: tuple["PlanRule", ...] = ()

    @property
    def configurable(self) -> bool:
        return self.required or self.optional

    @property
    def computed_only(self) -> bool:
        return self.computed and not self.configurable


@dataclass(frozen=True)
class ResourceSchema:
    kind: str
    version: int
    attributes: tuple[Attribute, ...]
    description: str = ""
    extra: dict[str, Any] = field(default_factory=dict)

    def attribute(self, name: str) -> Attribute | None:
        for attr in self.attributes:
            if attr.name == name:
                return attr
        return None

    @property
    def names(self) -> list[str]:
        return [a.name for a in self.attributes]

    @property
    def sensitive_names(self) -> list[str]:
        return [a.name for a in self.attributes if a.sensitive]
