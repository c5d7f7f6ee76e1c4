import os

# Settings for the document store. The deployed copy of this file is
# rendered by the deployment tooling, environment variables are only
# used for development and tests.
COUCHDB_USER = os.getenv("COUCHDB_USER", "gravifon")
COUCHDB_ADMIN_KEY = os.getenv("COUCHDB_ADMIN_KEY", "gravifon")
COUCHDB_HOST = os.getenv("COUCHDB_HOST", "couchdb")
COUCHDB_PORT = int(os.getenv("COUCHDB_PORT", "5984"))

# drop and/or create all databases on startup
COUCHDB_SETUP = os.getenv("COUCHDB_SETUP", "false").lower() == "true"
COUCHDB_CLEANUP = os.getenv("COUCHDB_CLEANUP", "false").lower() == "true"

#: The maximum number of items returned in one page of a range query
MAX_PAGE_SIZE = int(os.getenv("MAX_PAGE_SIZE", "50"))

# users who did not confirm their registration within this many hours are removed
REGISTRATION_THRESHOLD_HOURS = int(os.getenv("REGISTRATION_THRESHOLD_HOURS", "24"))

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
SENTRY_DSN = os.getenv("SENTRY_DSN")
