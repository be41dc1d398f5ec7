"""
Planning engine — registry, selection, closure, ordering and execution.

    registry → compute_candidates → close_over_dependencies → build_plan → Resolution

``resolve`` in ``acfs.core.engine.resolver`` runs the whole pipeline.
"""
