#!/usr/bin/env python3
"""
Seed the configured client store with the demo clients.

Only writes when the collection is empty, so it is safe to run against
a store that already holds real data.

Usage:
    python scripts/seed_sample_data.py

Reads the same environment (and .env file) as the API, e.g.:
    STORAGE_BACKEND=file DATA_DIR=./data python scripts/seed_sample_data.py
"""

import sys
from pathlib import Path

# Add project root to path so we can import our modules
sys.path.insert(0, str(Path(__file__).parent.parent))

from dotenv import load_dotenv

# Load environment variables
load_dotenv()

from fitcrm.api.dependencies import build_client_store
from fitcrm.config.settings import get_settings
from fitcrm.core.clients.samples import sample_clients


def main() -> int:
    settings = get_settings()

    if settings.storage_backend == "memory":
        print("STORAGE_BACKEND is 'memory'; seeded data would be lost on exit.")
        print("Set STORAGE_BACKEND=file or r2 to seed a persistent store.")
        return 1

    missing = settings.validate_required_fields()
    if missing:
        print(f"Missing required configuration: {', '.join(missing)}")
        return 1

    store = build_client_store(settings)
    seeded = store.seed_if_empty(sample_clients())

    if seeded:
        print(f"Seeded {seeded} sample clients ({settings.storage_backend} backend)")
    else:
        print(f"Store already has {len(store.list())} clients, nothing to do")
    return 0


if __name__ == "__main__":
    sys.exit(main())
