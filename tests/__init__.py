import os

# The test package is imported before conftest.py: keep the app's own engine
# off disk before league_admin.config reads the environment
os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")

# Register every table with SQLModel metadata at test discovery time
from league_admin.database import import_models  # noqa: E402

import_models()
