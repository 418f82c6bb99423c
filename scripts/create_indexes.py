#!/usr/bin/env python3
"""
Create the MongoDB indexes the API relies on.

The API also ensures them on startup; run this ahead of a deploy to build
indexes on a large collection before traffic arrives.

Usage:
    python scripts/create_indexes.py

Environment variables required:
    MONGODB_URI - MongoDB connection string
    MONGODB_DATABASE - Database name (default: kushfinds)
"""

import asyncio
import os
import sys

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from motor.motor_asyncio import AsyncIOMotorClient
from dotenv import load_dotenv

from app.database import ensure_indexes

# Load environment variables
load_dotenv()


async def create_indexes():
    """Create indexes on the configured database."""
    mongodb_uri = os.environ.get("MONGODB_URI", "mongodb://localhost:27017")
    database_name = os.environ.get("MONGODB_DATABASE", "kushfinds")

    client = AsyncIOMotorClient(mongodb_uri)
    try:
        await ensure_indexes(client[database_name])
        print(f"Indexes created on database: {database_name}")
    finally:
        client.close()


if __name__ == "__main__":
    print("Index Bootstrap Script")
    print("-" * 40)
    asyncio.run(create_indexes())
