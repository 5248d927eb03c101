"""
Shared module for cross-cutting concerns of the LifeX backend.

STRUCTURE:
- shared.infrastructure: Database and request plumbing
  - db.py: SQLAlchemy engine and sessions
  - correlation.py: Request ID / actor middleware and log filter

- shared.config: Configuration
  - settings.py: Environment config (pydantic-settings)
  - logging.py: Structured logging and audit logger
  - constants.py: Header names, archive enums, limits

- shared.utils: Utilities
  - exceptions.py: HTTP exceptions with auto-logging

IMPORT EXAMPLES:
    from shared.infrastructure.db import get_db, get_db_context
    from shared.config.settings import settings
    from shared.config.logging import get_logger
    from shared.utils.exceptions import NotFoundError, ValidationError
"""
