"""Root conftest: shared test configuration."""

import os

# Ensure tests don't accidentally use real credentials
os.environ.setdefault("ANTHROPIC_API_KEY", "sk-ant-test-fake-key")
os.environ.setdefault("CLERK_SECRET_KEY", "sk_test_fake_key")
os.environ.setdefault(
    "DATABASE_URL",
    "sqlite+aiosqlite:///test.db",
)
