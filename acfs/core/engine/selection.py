"""
Selection filter engine — turn criteria into a raw candidate set.

Pure: reads the registry and the criteria, returns new maps, raises on
unknown identifiers before doing any other work.

Steps:
    1. validate only / skip ids and only-phase numbers
    2. explicit selection (only ∪ only-phase) or default-enabled modules
    3. apply skip, skip-tag and skip-category rules
    4. everything left over is "not selected"
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from acfs.core.engine.errors import UnknownIdentifierError
from acfs.core.engine.registry import ModuleRegistry
from acfs.core.models.module import Module
from acfs.core.models.plan import (
    EXCLUDE_CATEGORY,
    EXCLUDE_DISABLED,
    EXCLUDE_NOT_SELECTED,
    EXCLUDE_SKIPPED,
    EXCLUDE_TAG,
    REASON_DEFAULT,
    REASON_EXPLICIT,
    REASON_PHASE,
)
from acfs.core.models.selection import SelectionCriteria

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CandidateSet:
    """Output of the selection step.

    ``skipped`` is the subset of ``excluded`` removed by a skip rule.
    Only those exclusions can make a dependency unsatisfiable; a module
    that is merely "not selected" or "disabled by default" may still be
    pulled in by the dependency closure.
    """

    candidates: dict[str, str]
    excluded: dict[str, str]
    skipped: frozenset[str]


def validate_criteria(criteria: SelectionCriteria, registry: ModuleRegistry) -> None:
    """Fail fast on identifiers the registry does not know.

    Raises:
        UnknownIdentifierError: for the first offending field, listing
            every unknown value in it.
    """
    unknown_only = [m for m in criteria.only if m not in registry]
    if unknown_only:
        raise UnknownIdentifierError("only", unknown_only)

    known_phases = set(registry.phases())
    unknown_phases = [p for p in criteria.only_phase if p not in known_phases]
    if unknown_phases:
        raise UnknownIdentifierError("only_phase", unknown_phases)

    unknown_skip = [m for m in criteria.skip if m not in registry]
    if unknown_skip:
        raise UnknownIdentifierError("skip", unknown_skip)

    unknown_tags = sorted(criteria.skip_tag - set(registry.tags()))
    if unknown_tags:
        logger.warning("skip-tag matches no module: %s", ", ".join(unknown_tags))

    unknown_categories = sorted(criteria.skip_category - set(registry.categories()))
    if unknown_categories:
        logger.warning("skip-category matches no module: %s", ", ".join(unknown_categories))


def _skip_reason(module: Module, criteria: SelectionCriteria) -> str | None:
    """Which skip rule removes this module, if any.

    Precedence: explicit skip, then tag (alphabetically first match),
    then category.
    """
    if module.id in criteria.skip:
        return EXCLUDE_SKIPPED
    for tag in module.tags:
        if tag in criteria.skip_tag:
            return EXCLUDE_TAG.format(tag=tag)
    if module.category and module.category in criteria.skip_category:
        return EXCLUDE_CATEGORY.format(category=module.category)
    return None


def compute_candidates(criteria: SelectionCriteria, registry: ModuleRegistry) -> CandidateSet:
    """Build the raw candidate set and the initial exclusion map.

    Args:
        criteria: The user's selection filters.
        registry: The validated module registry.

    Returns:
        CandidateSet whose ``candidates`` and ``excluded`` keys partition
        the registry.

    Raises:
        UnknownIdentifierError: when ``only``, ``skip`` or ``only_phase``
            names something that does not exist.
    """
    validate_criteria(criteria, registry)

    candidates: dict[str, str] = {}
    excluded: dict[str, str] = {}

    if criteria.is_explicit:
        for module in registry:
            if module.id in criteria.only:
                candidates[module.id] = REASON_EXPLICIT
            elif module.phase in criteria.only_phase:
                candidates[module.id] = REASON_PHASE
    else:
        for module in registry:
            if module.enabled_by_default:
                candidates[module.id] = REASON_DEFAULT
            else:
                excluded[module.id] = EXCLUDE_DISABLED

    # Skip rules win over every kind of selection, including "only".
    skipped: set[str] = set()
    for module in registry:
        reason = _skip_reason(module, criteria)
        if reason is None:
            continue
        candidates.pop(module.id, None)
        excluded[module.id] = reason
        skipped.add(module.id)

    for module_id in registry.ids():
        if module_id not in candidates and module_id not in excluded:
            excluded[module_id] = EXCLUDE_NOT_SELECTED

    logger.debug(
        "Selection: %d candidates, %d excluded (%d by skip rules)",
        len(candidates),
        len(excluded),
        len(skipped),
    )
    return CandidateSet(
        candidates=candidates,
        excluded=excluded,
        skipped=frozenset(skipped),
    )
