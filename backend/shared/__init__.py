"""
Shared module for code common to the admin API, the CLI and migrations.

STRUCTURE:
- shared.infrastructure: Database and request plumbing
  - db.py: SQLAlchemy sessions, safe_commit()
  - correlation.py: X-Request-ID middleware and logging filter

- shared.config: Configuration
  - settings.py: Environment config (pydantic-settings)
  - logging.py: Structured logging
  - constants.py: Bit limits, dish types, zones, durations

- shared.utils: Utilities
  - masks.py: Bitmask codec and in-memory filters
  - exceptions.py: HTTP exceptions with auto-logging
  - validators.py: Input validation helpers
  - i18n.py: Translated text helpers
  - admin_schemas.py: Pydantic request/response schemas

IMPORT EXAMPLES:
    from shared.infrastructure.db import get_db, safe_commit
    from shared.config.settings import settings
    from shared.config.constants import BitLimits, DishType
    from shared.utils.masks import encode, decode, matches_all
    from shared.utils.exceptions import NotFoundError, ConflictError
"""
