"""
Shared module for common utilities across the REST API and the WS gateway.

STRUCTURE:
- shared.infrastructure: Database and request plumbing
  - db.py: SQLAlchemy engine, sessions, safe_commit()
  - correlation.py: X-Request-ID middleware and log filter

- shared.config: Configuration
  - settings.py: Environment config (pydantic-settings)
  - logging.py: Structured logging
  - constants.py: OrderStatus, transitions, event types

- shared.utils: Utilities
  - exceptions.py: HTTP exceptions with auto-logging
  - schemas.py: Shared Pydantic schemas

- shared.rate_limit: slowapi limiter for write endpoints

IMPORT EXAMPLES:
    from shared.infrastructure.db import get_db, safe_commit
    from shared.config.settings import settings
    from shared.config.constants import OrderStatus, ORDER_TRANSITIONS
    from shared.utils.exceptions import NotFoundError, ValidationError
"""
