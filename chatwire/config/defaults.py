"""chatwire.config.defaults
========================

Small, stable default values for settings and the CLI. Plain constants only;
nothing here imports other chatwire packages.
"""

from __future__ import annotations

# ---- Settings ----
# Global base URL used when neither the model nor the environment sets one.
DEFAULT_BASE_URL = "https://api.openai.com/v1"
# Minimum gap between consecutive requests; 0 disables pacing.
DEFAULT_DELAY_MS = 0

# Key prefix used by existing editor settings files (``oaicopilot.models``).
LEGACY_SETTINGS_PREFIX = "oaicopilot."

# ---- CLI ----
CLI_PROG = "chatwire"
