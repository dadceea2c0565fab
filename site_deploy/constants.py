"""Global constants for site-deploy-tool"""

from enum import Enum

APP_NAME = "site-deploy"
LOG_FORMAT = "%(message)s"

# Project identification
PROJECT_CONFIG_FILE = ".site-deploy.yaml"

# Upload defaults
DEFAULT_BATCH_SIZE = 5
DEFAULT_RETRY_COUNT = 3
DEFAULT_RETRY_DELAY = 1.0  # seconds, fixed between attempts
DEFAULT_SETTLE_DELAY = 2.0  # seconds before enabling Pages
DEFAULT_HTTP_TIMEOUT = 60.0

# Ingestion limits
INDEX_HTML_CAPTURE_LIMIT = 500 * 1024  # 500KB
TEXT_SCAN_LIMIT = 1024 * 1024  # 1MB
SCANNABLE_EXTENSIONS = (".html", ".css", ".js")

# Archiver junk that never reaches the manifest
RESERVED_ARCHIVE_MARKERS = ("__MACOSX",)

# Build output folders that indicate a source upload
BUILD_OUTPUT_DIRS = ("dist/", "build/", "out/")

# Ignore rules: (kind, pattern, reason); evaluated in order, first match wins
IGNORE_RULES = (
    ("contains", ".DS_Store", "System file"),
    ("contains", "Thumbs.db", "System file"),
    ("contains", "node_modules/", "Dependency folder (should be built)"),
    ("prefix", ".git/", "Git metadata"),
    ("suffix", ".log", "Log file"),
    ("suffix", ".env", "Environment file (security risk)"),
    ("contains", ".vscode/", "Editor config"),
    ("contains", ".idea/", "Editor config"),
)

# Generated files
WORKFLOW_PATH = ".github/workflows/deploy.yml"
CNAME_FILE = "CNAME"
DEFAULT_FILE_MODE = "100644"

# Provider endpoints
GITHUB_API_BASE = "https://api.github.com"
FIREBASE_API_BASE = "https://firebasehosting.googleapis.com/v1beta1"
FIREBASE_CACHE_CONTROL = "max-age=1800"

DEFAULT_REPO_DESCRIPTION = "Deployed via site-deploy-tool"
DEFAULT_COMMIT_MESSAGE = "Deploy project via site-deploy-tool"


class Provider(Enum):
    """Hosting providers a project can be published to"""
    GITHUB = "github"
    FIREBASE = "firebase"


# Error codes
class ErrorCode:
    CONFIG_FORMAT_ERROR = "SD001"
    MISSING_REQUIRED_PARAMETER = "SD002"
    CORRUPT_ARCHIVE = "SD003"
    INVALID_UPLOAD = "SD004"
    PROVIDER_CONFLICT = "SD005"
    NETWORK_TRANSIENT = "SD006"
    PROVIDER_FAILURE = "SD007"
    DEPLOY_FAILED = "SD008"


# Environment variables
ENV_CONFIG_PATH = "SITE_DEPLOY_CONFIG"
ENV_GITHUB_TOKEN = "GITHUB_TOKEN"
ENV_FIREBASE_TOKEN = "FIREBASE_TOKEN"

# Display constants
EMOJI_SUCCESS = "✓"
EMOJI_ERROR = "✗"
EMOJI_WARNING = "⚠"
EMOJI_INFO = "ℹ"
EMOJI_ROCKET = "🚀"
