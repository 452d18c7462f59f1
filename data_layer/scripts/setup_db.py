"""Creates the DynamoDB tables and optionally loads the sample data.

Usage:
    python -m data_layer.scripts.setup_db                      # create tables
    python -m data_layer.scripts.setup_db --seed               # create and load sample data
    python -m data_layer.scripts.setup_db --delete             # delete every table
    python -m data_layer.scripts.setup_db --region eu-west-1   # different region
"""

from __future__ import annotations

import logging
import sys
from dataclasses import replace
from typing import Optional

from data_layer.generators.sample_data import seed_sample_data
from data_layer.infrastructure.dynamodb_setup import create_tables, delete_tables
from product_management.config import load_settings
from product_management.errors import ProductManagementError
from product_management.services import build_services
from product_management.store import open_store


def main(argv: Optional[list[str]] = None) -> int:
    settings = load_settings()
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s [%(name)s] %(levelname)s: %(message)s",
    )

    delete_mode = False
    seed = False

    # Parse arguments
    args = sys.argv[1:] if argv is None else argv
    for i, arg in enumerate(args):
        if arg == "--delete":
            delete_mode = True
        elif arg == "--seed":
            seed = True
        elif arg == "--region" and i + 1 < len(args):
            settings = replace(settings, region=args[i + 1])

    if delete_mode:
        print("🗑️  Deleting tables...\n")
        delete_tables(settings.region, settings.endpoint_url, settings.table_prefix)
        print("\n✅ Tables deleted")
        return 0

    print("=" * 60)
    print("🚀 Product Management - DynamoDB setup")
    print(f"   Region: {settings.region}")
    print("=" * 60)

    print("\n📊 STEP 1: Tables")
    print("-" * 40)
    create_tables(settings.region, settings.endpoint_url, settings.table_prefix)

    if seed:
        print("\n📤 STEP 2: Sample data")
        print("-" * 40)
        try:
            with open_store(replace(settings, backend="dynamodb")) as store:
                summary = seed_sample_data(build_services(store, settings))
        except ProductManagementError as e:
            print(f"❌ Sample data failed: {e}")
            return 1
        for name, count in summary.items():
            print(f"  ✓  {name}: {count} inserted")

    print("\n✅ Setup complete")
    return 0


if __name__ == "__main__":
    sys.exit(main())
