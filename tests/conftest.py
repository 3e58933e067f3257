# tests/conftest.py

"""
Shared test configuration.

Settings are read from the environment when app modules are imported,
so the required variables are seeded before any test module loads.
"""

import os

os.environ.setdefault("SUPABASE_URL", "https://example.supabase.co")
os.environ.setdefault("SUPABASE_SERVICE_ROLE_KEY", "test-service-role-key")
