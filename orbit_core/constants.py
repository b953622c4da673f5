# orbit_core/constants.py

SESSION_KEY = "userSession"

# Path scope prefix for a user's writable namespace
USERS_PREFIX = "users"

# Grantee value requesting a public grant from /add-write-access
PUBLIC_GRANT = "*"

# Backend endpoints
REQUEST_TOKEN_ENDPOINT = "/request-token"
REGISTER_ENDPOINT = "/register"
AUTHENTICATE_ENDPOINT = "/authenticate"
ACL_ENDPOINT = "/acl"
ADD_WRITE_ACCESS_ENDPOINT = "/add-write-access"

# Environment
ENV_BACKEND_URL = "ORBIT_BACKEND_URL"
ENV_SESSION_PROVIDER = "ORBIT_SESSION_PROVIDER"
ENV_DB_PATH = "ORBIT_DB_PATH"
ENV_HTTP_TIMEOUT = "ORBIT_HTTP_TIMEOUT"
ENV_LOG_LEVEL = "ORBIT_LOG_LEVEL"

DEFAULT_BACKEND_URL = "http://localhost:3000"
DEFAULT_DB_PATH = "db/orbit_session.db"
DEFAULT_HTTP_TIMEOUT = 5.0

SEED_BYTES = 32
NONCE_BYTES = 12
