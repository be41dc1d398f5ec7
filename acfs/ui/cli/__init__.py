"""
CLI sub-command groups, registered on the root group in ``acfs.main``.
"""
