"""Shared constants for the collection pipeline.

For environment-based configuration (credentials, database path), use the env module:
    from common.env import env
    db_path = env.database_path()
"""

# Candidates kept from each query branch of a batch search
MAX_CANDIDATES_PER_BRANCH = 5

# Rows per page in manual search
MANUAL_SEARCH_PAGE_SIZE = 20

# Workflow status given to newly matched items
DEFAULT_STATUS = "FINISHED"

# HTTP timeout for provider and page fetches, in seconds
REQUEST_TIMEOUT = 10

USER_AGENT = "content-collect/1.0"
