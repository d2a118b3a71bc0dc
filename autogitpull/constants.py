"""
autogitpull Constants

Centralized constants for defaults, provider ranges and messages.
"""

from pathlib import Path

# Default git configuration
DEFAULT_BRANCH = "master"
DEFAULT_REMOTE = "origin"

# Update script shipped with the package
PACKAGE_DIR = Path(__file__).resolve().parent
DEFAULT_PULL_SCRIPT_PATH = str(PACKAGE_DIR / "scripts" / "git-pull.sh")

# Hosting provider webhook ranges
DEFAULT_ALLOWED_RANGES = (
    "131.103.20.160/27",  # Bitbucket
    "165.254.145.0/26",  # Bitbucket
    "104.192.143.0/24",  # Bitbucket
    "192.30.252.0/22",  # GitHub
)

# Log Configuration
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
LOG_FILE_PREFIX = "auto-git-pull-"
LOG_FILE_MODE = 0o666

# Request inspection
HEADER_PREFIX = "HTTP_"
CDN_IP_HEADER = "HTTP_CF_CONNECTING_IP"
FORWARDED_FOR_HEADER = "HTTP_X_FORWARDED_FOR"
PAYLOAD_FIELD = "payload"

# Script runner
RUN_AS_COMMAND = ("sudo", "-u")
LAUNCH_FAILURE_EXIT_CODE = 127

# Notification subjects
SUBJECT_SUCCESS = "Deployment successful"
SUBJECT_FAILURE = "Deployment script failed"
SUBJECT_UNAUTHORIZED = "Unauthorized deployment attempt"

# Mail defaults
DEFAULT_SMTP_HOST = "localhost"
DEFAULT_SMTP_PORT = 25
DEFAULT_MAIL_SENDER = "autogitpull@localhost"

# Server defaults
DEFAULT_SERVER_HOST = "0.0.0.0"
DEFAULT_SERVER_PORT = 8000
DEFAULT_WEBHOOK_PATH = "/deploy"

# Config file lookup
CONFIG_ENV_VAR = "AUTOGITPULL_CONFIG"
DEFAULT_CONFIG_FILE = "autogitpull.yml"
