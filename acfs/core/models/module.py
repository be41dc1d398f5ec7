"""
Module model — one installable unit from the manifest.

Modules are declared once in the manifest and never change for the
lifetime of a run. The model is frozen so a registry can hand the same
instances to every reader.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Module(BaseModel):
    """A manifest entry: identity, phase, dependencies and classification.

    ``tags`` and ``dependencies`` are normalized to sorted, de-duplicated
    tuples so that two manifests listing the same values in a different
    order produce identical models.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    # ── Planning fields ──────────────────────────────────────────
    id: str = Field(min_length=1)
    phase: int = Field(ge=1)
    dependencies: tuple[str, ...] = ()
    tags: tuple[str, ...] = ()
    category: str = ""
    enabled_by_default: bool = True

    # ── Informational / executor fields ──────────────────────────
    description: str = ""
    install: tuple[str, ...] = ()  # shell commands, run in order

    @field_validator("id", "category")
    @classmethod
    def _strip(cls, value: str) -> str:
        return value.strip()

    @field_validator("dependencies", "tags")
    @classmethod
    def _normalize(cls, value: tuple[str, ...]) -> tuple[str, ...]:
        return tuple(sorted({v.strip() for v in value if v.strip()}))

    def has_tag(self, tag: str) -> bool:
        """Check whether the module carries a tag."""
        return tag in self.tags
