#!/usr/bin/env python3
"""
Migration script to hash credentials that were stored in plain text.

This script:
1. Finds users whose stored password is not a bcrypt hash
2. Hashes the stored value with the service's password hasher
3. Replaces it, only if the document still holds the old value

Once it has run against a database, the login pipeline's plaintext
fallback no longer triggers for that data.

Usage:
    python scripts/rehash_legacy_passwords.py [--dry-run]

Environment variables required:
    MONGODB_URI - MongoDB connection string
    MONGODB_DATABASE - Database name (default: user-auth)
"""

import argparse
import asyncio
import os
import sys

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from dotenv import load_dotenv
from motor.motor_asyncio import AsyncIOMotorClient

from common.auth import PasswordHasher
from userauth.user.services.user_store import CREDENTIAL_FIELD, UserStore

# Load environment variables
load_dotenv()


async def rehash_legacy_passwords(dry_run: bool = False) -> int:
    """Rehash every legacy credential; returns the number updated."""

    mongodb_uri = os.getenv("MONGODB_URI")
    database_name = os.getenv("MONGODB_DATABASE", "user-auth")
    rounds = int(os.getenv("BCRYPT_ROUNDS", "12"))

    if not mongodb_uri:
        print("ERROR: MONGODB_URI environment variable not set")
        sys.exit(1)

    print(f"Connecting to database: {database_name}")
    client = AsyncIOMotorClient(mongodb_uri)
    store = UserStore(client[database_name])
    hasher = PasswordHasher(rounds=rounds)

    print("Fetching users with legacy credentials...")
    candidates = await store.list_legacy_credentials()
    legacy = [user for user in candidates if not hasher.is_hash(user[CREDENTIAL_FIELD])]
    print(f"Found {len(legacy)} users with unhashed credentials")

    if not legacy:
        print("Nothing to migrate.")
        client.close()
        return 0

    updated = 0
    skipped = 0
    for user in legacy:
        if dry_run:
            print(f"  would rehash {user['_id']} ({user.get('email')})")
            continue

        stored = user[CREDENTIAL_FIELD]
        new_hash = await hasher.hash(stored)
        if await store.replace_credential(user["_id"], stored, new_hash):
            updated += 1
        else:
            # Changed or deleted since it was read
            skipped += 1

    # Print summary
    print("\n" + "=" * 50)
    print("Migration Summary")
    print("=" * 50)
    print(f"Legacy credentials found: {len(legacy)}")
    print(f"Rehashed: {updated}")
    print(f"Skipped (changed concurrently): {skipped}")
    if dry_run:
        print("Dry run: no documents were modified")
    print("=" * 50)

    client.close()
    print("\nMigration complete!")
    return updated


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[1])
    parser.add_argument("--dry-run", action="store_true", help="List affected users only")
    args = parser.parse_args()

    print("Legacy Password Rehash Script")
    print("-" * 40)
    asyncio.run(rehash_legacy_passwords(dry_run=args.dry_run))
