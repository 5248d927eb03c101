"""
Application wiring: lifespan and middlewares.
"""
