import os
import tempfile

# Point the app at a throwaway SQLite file before app.config is imported.
TEST_DB = os.path.join(tempfile.gettempdir(), "marketplace_test.db")
os.environ.setdefault("DATABASE_URL", f"sqlite:///{TEST_DB}")
os.environ.setdefault("SECRET_KEY", "test-secret")
os.environ.setdefault("CLEAR_CART_ON_CHECKOUT", "false")
