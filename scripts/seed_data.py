import argparse
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from smartstock.core.constants import STORAGE_KEYS
from smartstock.core.logging import setup_logging
from smartstock.database import SessionLocal, engine, ensure_schema
from smartstock.database.kv_store import MemoryKeyValueStore, SqlKeyValueStore
from smartstock.services.persistence_service import load_store, save_store


def parse_args():
    parser = argparse.ArgumentParser(description="Write the seed inventory to storage.")
    parser.add_argument(
        "--reset",
        action="store_true",
        help="Overwrite stored collections with the seed data.",
    )
    return parser.parse_args()


def main():
    setup_logging()
    args = parse_args()

    ensure_schema(engine)
    backend = SqlKeyValueStore(SessionLocal)

    if args.reset:
        # Empty backend -> every collection falls back to its seed.
        store = load_store(MemoryKeyValueStore())
    else:
        if any(backend.get(key) is not None for key in STORAGE_KEYS):
            print("Seed skipped: stored inventory already exists.")
            return
        store = load_store(backend)

    save_store(backend, store)
    print(f"Seeded {len(store.products)} products across {len(store.sites)} sites.")


if __name__ == "__main__":
    main()
