"""
Application services.

- archive: cascading archive/restore engine over the entity graph
"""
