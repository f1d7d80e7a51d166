"""Root conftest — shared test configuration."""

import os

# Keep tests off any real database configured in the shell
os.environ.setdefault(
    "DATABASE_URL",
    "sqlite+aiosqlite:///test.db",
)
os.environ.setdefault("LOG_FORMAT", "text")
