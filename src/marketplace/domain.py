"""Marketplace bounded context — vendors, suppliers, catalogue, orders, group buying and ratings.

Composition root for the street-food supply marketplace. The domain is
constructed here and initialised by each process entry point (the FastAPI
app, the management CLI, the test fixture); repositories are resolved from
the active domain context rather than from a module-level store.
"""

import os

from protean.domain import Domain

from marketplace.utils.logging import configure_logging, get_logger

# Tests and containers log to stdout only
configure_logging(log_dir=None if os.getenv("PROTEAN_ENV") == "test" else os.getenv("LOG_DIR", "logs"))

logger = get_logger(__name__)

marketplace = Domain(name="marketplace")

if os.getenv("DATABASE_URL"):
    marketplace.config["databases"]["default"] = {
        "provider": "postgresql",
        "database_uri": os.environ["DATABASE_URL"],
    }
