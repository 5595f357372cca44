"""
Centralized test credentials and secrets.

Loaded from environment variables when available, with clearly
non-production placeholders as fallbacks.
"""

from __future__ import annotations

import os

# App config used by conftest
TEST_SECRET_KEY = os.environ.get("TEST_SECRET_KEY") or "test-secret-key"

# Provider signing secret; svix expects whsec_<base64>
TEST_WEBHOOK_SECRET = (
    os.environ.get("TEST_WEBHOOK_SECRET") or "whsec_MfKQ9r8GKYqrTwjUPD8ILPZIo2LaLaSw"
)

# Caller ids for fixtures
TEST_ADMIN_ID = "user_admin_1"
TEST_MEMBER_ID = "user_member_2"
TEST_OUTSIDER_ID = "user_outsider_3"
