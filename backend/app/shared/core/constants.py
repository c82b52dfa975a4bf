"""
Centralized Constants for the Flow Builder Backend.
All hardcoded values should be defined here for easy maintenance.
"""

# ============================================
# KLAVIYO API PATHS (relative to KLAVIYO_API_BASE_URL)
# ============================================
KLAVIYO_FLOWS_PATH = "/api/flows/"
KLAVIYO_FLOW_ACTIONS_PATH = "/api/flow-actions/"
KLAVIYO_TEMPLATES_PATH = "/api/templates/"

# Authorization scheme Klaviyo expects in front of a private key
KLAVIYO_AUTH_SCHEME = "Klaviyo-API-Key"

# ============================================
# API TIMEOUTS (in seconds)
# ============================================
TIMEOUT_KLAVIYO_CONNECT = 10.0        # TCP connect; total timeout comes from settings

# ============================================
# EMAIL ACTION DEFAULTS
# ============================================
# Klaviyo resolves these placeholders against the account's organization profile
DEFAULT_FROM_EMAIL = "{{ organization.primary_email }}"
DEFAULT_FROM_LABEL = "{{ organization.name }}"
DEFAULT_TRACK_OPENS = True
DEFAULT_TRACK_CLICKS = True

# ============================================
# CLI EXIT CODES
# ============================================
EXIT_OK = 0
EXIT_ERROR = 1
EXIT_PARTIAL_FAILURE = 2
