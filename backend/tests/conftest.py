import os

# Keep imports of cinegraph.db.session off the real database.
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("AUTO_CREATE_SCHEMA", "false")
