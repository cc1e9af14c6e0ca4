#!/usr/bin/env python3
"""
Seed the LinkNITT Neo4j graph with demo data.

Clears the database, creates the schema constraints, then loads the demo
users, items, jobs, mentorships and relationships.

Usage:
    python scripts/seed_neo4j.py            # wipe and seed
    python scripts/seed_neo4j.py --no-reset # load on top of existing data

Environment Variables:
    NEO4J_URI: Neo4j connection URI (required)
    NEO4J_USER: Neo4j username (default: neo4j)
    NEO4J_PASSWORD: Neo4j password
"""

import argparse
import asyncio
import logging
import sys

from linknitt.auth.passwords import PasswordHasher
from linknitt.core.config import get_settings
from linknitt.core.logging import setup_structured_logging
from linknitt.domain.seed import DEMO_PASSWORD, DEMO_USERS, build_demo_dataset
from linknitt.graph.exceptions import GraphStoreError
from linknitt.graph.neo4j_client import Neo4jClient
from linknitt.graph.schema import SchemaManager
from linknitt.graph.store import Neo4jDomainStore

logger = logging.getLogger("linknitt.scripts.seed")


async def seed(reset: bool) -> None:
    settings = get_settings()
    hasher = PasswordHasher(rounds=settings.bcrypt_rounds)

    async with Neo4jClient(settings=settings) as client:
        store = Neo4jDomainStore(client)
        if reset:
            logger.info("Clearing database")
            await store.reset()
        await SchemaManager(client).init_schema()
        await store.load_dataset(build_demo_dataset(hasher.hash))


def main() -> int:
    parser = argparse.ArgumentParser(description="Seed the LinkNITT graph with demo data")
    parser.add_argument(
        "--no-reset",
        action="store_true",
        help="Keep existing nodes instead of deleting everything first",
    )
    args = parser.parse_args()

    setup_structured_logging()
    try:
        asyncio.run(seed(reset=not args.no_reset))
    except GraphStoreError:
        logger.exception("Seeding failed")
        return 1

    print("Login credentials (demo):")
    for user in DEMO_USERS:
        print(f" - {user.email:<16} / password: {DEMO_PASSWORD}  ({user.role})")
    return 0


if __name__ == "__main__":
    sys.exit(main())
