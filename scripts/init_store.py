#!/usr/bin/env python3
"""
Initialise a replica's record store from a seed file.

Run once per replica before its first start (for example from a container
entrypoint). The store is only created when it does not exist yet, so a
restart never overwrites data a replica has accumulated.
"""

import argparse
import os
import sys

sys.path.append(os.path.join(os.path.dirname(__file__), '..'))

from shared.logging import configure_logging  # noqa: E402
from shared.store import RecordStore  # noqa: E402


def _parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Seed a replica store if it does not exist.")
    parser.add_argument("--db-file", default=os.getenv("STOREFRONT_DB_FILE"), help="Store file of this replica")
    parser.add_argument("--seed", default=os.getenv("STOREFRONT_SEED_FILE"), help="Seed JSON file to copy from")
    parser.add_argument("--name", default="records", help="Store name used in logs")
    return parser.parse_args()


def main() -> int:
    args = _parse_args()
    if not args.db_file:
        print("[init-store] --db-file (or STOREFRONT_DB_FILE) is not set", file=sys.stderr)
        return 1
    if not args.seed:
        print("[init-store] --seed (or STOREFRONT_SEED_FILE) is not set", file=sys.stderr)
        return 1

    configure_logging("init_store", os.getenv("STOREFRONT_LOG_LEVEL", "info"))
    store = RecordStore(args.db_file, name=args.name)
    try:
        created = store.seed_if_missing(args.seed)
    except OSError as exc:
        print(f"[init-store] failed: {exc}", file=sys.stderr)
        return 1

    print(f"[init-store] {'initialized from seed' if created else 'already exists'}: {args.db_file}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
