"""Global constants for app-publisher"""

import re

APP_NAME = "app-publisher"
LOG_FORMAT = "%(message)s"

# Settings file
DEFAULT_SETTINGS_FILE = "~/.app-publisher.yaml"

# Bundle output
BUNDLE_DIR_NAME = "app-publisher-bundles"
BUNDLE_FILE_PATTERN = "app-{owner_id}-{timestamp}.zip"
BUNDLE_COMPRESSION_LEVEL = 9  # Maximum deflate compression
BUNDLE_ENTRY_DATE_TIME = (1980, 1, 1, 0, 0, 0)  # Earliest timestamp zip can store
BUNDLE_FILE_MODE = 0o644
HASH_CHUNK_SIZE = 64 * 1024

# Directories never shipped in a bundle (matched against whole path segments)
EXCLUDED_DIRECTORIES = frozenset([
    # Dependency caches
    "node_modules",
    "vendor",
    "venv",
    ".venv",
    "__pycache__",
    # Version control
    ".git",
    ".svn",
    ".hg",
    # Build output
    "dist",
    "build",
    "out",
    ".next",
    ".vercel",
    ".netlify",
    "coverage",
    ".nyc_output",
    # Platform caches
    ".cache",
    ".turbo",
    ".parcel-cache",
    ".pytest_cache",
    # Editors and IDEs
    ".idea",
    ".vscode",
    ".fleet",
    ".vs",
])

# Basename patterns never shipped in a bundle (full-match regexes)
EXCLUDED_FILE_PATTERNS = tuple(re.compile(p) for p in [
    # Environment and secrets
    r"\.env.*",
    r"\.secret.*",
    r".*\.key",
    r".*\.pem",
    r".*\.p12",
    r".*\.pfx",
    # OS housekeeping
    r"\.DS_Store",
    r"Thumbs\.db",
    r"desktop\.ini",
    r"\._.*",
    # Editor swap and backup files
    r".*\.swp",
    r".*\.swo",
    r".*~",
    r"\.#.*",
    # Package-manager lockfiles
    r"package-lock\.json",
    r"pnpm-lock\.yaml",
    r"yarn\.lock",
    r"bun\.lockb",
    # Logs
    r".*\.log",
    r"npm-debug\.log.*",
    r"yarn-debug\.log.*",
    r"yarn-error\.log.*",
    # Package-manager credentials
    r"\.npmrc",
    r"\.yarnrc.*",
])

# Stub transport simulation (seconds)
STUB_PHASE_DURATIONS = {
    "queued": 1.0,
    "packaging": 3.0,
    "uploading": 4.0,
    "building": 4.0,
    "deploying": 3.0,
}
STUB_RETENTION_SECONDS = 60 * 60
STUB_JOB_PREFIX = "stub-"
STUB_URL_PREFIX = "stub://local/"

# Broker HTTP contract
BROKER_START_PATH = "/publish/start"
BROKER_STATUS_PATH = "/publish/status"
BROKER_CANCEL_PATH = "/publish/cancel"
DEVICE_TOKEN_HEADER = "X-Device-Token"
BROKER_MISCONFIGURED_CODE = "BrokerMisconfigured"
JOB_NOT_FOUND_MESSAGE = "Publish not found"

# Diagnostics
FINGERPRINT_LENGTH = 8
REDACTED_INVALID_URL = "[invalid-url]"
STUB_TRANSPORT_LABEL = "[stub-transport]"

# Environment variables
ENV_CONFIG_PATH = "APP_PUBLISHER_CONFIG"
ENV_BROKER_URL = "APP_PUBLISHER_BROKER_URL"
ENV_BROKER_URL_FALLBACK = "BROKER_URL"
ENV_DEVICE_TOKEN = "APP_PUBLISHER_DEVICE_TOKEN"
ENV_BUNDLE_DIR = "APP_PUBLISHER_BUNDLE_DIR"


# Error codes
class ErrorCode:
    CONFIG_ERROR = "AP001"
    BUNDLING_FAILED = "AP002"
    AUTHENTICATION_FAILED = "AP003"
    ACCESS_DENIED = "AP004"
    NOT_FOUND = "AP005"
    RATE_LIMITED = "AP006"
    BROKER_MISCONFIGURED = "AP007"
    SERVICE_UNAVAILABLE = "AP008"
    PROTOCOL_ERROR = "AP009"
    UNKNOWN_BROKER_ERROR = "AP010"
    UPLOAD_FAILED = "AP011"
    BROKER_UNREACHABLE = "AP012"
    INVALID_REQUEST = "AP013"


# Display constants
EMOJI_SUCCESS = "✓"
EMOJI_ERROR = "✗"
EMOJI_WARNING = "⚠"
EMOJI_PACKAGE = "📦"
EMOJI_ROCKET = "🚀"

# Message templates
MSG_BUNDLE_SUCCESS = f"{EMOJI_PACKAGE} Bundle created: {{path}} ({{size}}, {{count}} files)"
MSG_PUBLISH_STARTED = f"{EMOJI_ROCKET} Publish started: {{job_id}}"
MSG_PUBLISH_READY = f"{EMOJI_SUCCESS} Live at {{url}}"
MSG_PUBLISH_FAILED = f"{EMOJI_ERROR} Publish failed: {{error}}"
MSG_PUBLISH_CANCELLED = f"{EMOJI_WARNING} Publish cancelled"
