"""
Domain models — Pydantic and dataclass types for the planner.

All models are re-exported here for convenient access:

    from acfs.core.models import Module, SelectionCriteria, Resolution
"""

from acfs.core.models.action import Action, Receipt
from acfs.core.models.module import Module
from acfs.core.models.plan import Resolution
from acfs.core.models.selection import SelectionCriteria

__all__ = [
    # action.py
    "Action",
    "Receipt",
    # module.py
    "Module",
    # plan.py
    "Resolution",
    # selection.py
    "SelectionCriteria",
]
