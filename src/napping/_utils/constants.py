# Environment variables
ENV_ENCODING = "NAPPING_ENCODING"
ENV_LOG = "NAPPING_LOG"
ENV_TIMEOUT = "NAPPING_TIMEOUT"
ENV_UNSAFE_BASIC_AUTH = "NAPPING_UNSAFE_BASIC_AUTH"

# Headers
HEADER_ACCEPT = "Accept"
HEADER_AUTHORIZATION = "Authorization"
HEADER_CONTENT_TYPE = "Content-Type"

# Content types
CONTENT_TYPE_JSON = "application/json"
CONTENT_TYPE_XML = "application/xml"

# Schemes
SECURE_SCHEMES = frozenset({"https", "unix"})
UNIX_SCHEME = "unix"
UNIX_SOCKET_HOST = "localhost"

LOGGER_NAME = "napping"
