"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

DEFAULT_PAGE_SIZE = 25
MAX_PAGE_SIZE = 100

ALREADY_CHECKED_IN_MESSAGE = "This benefit unit owner is already checked in and has a ballot!"

SHAREHOLDER_ID_MIN = 100000
SHAREHOLDER_ID_MAX = 999999

MAILER_BATCH_SIZE = 50
RESET_PASSWORD_LIFESPAN_SECONDS = 43200
