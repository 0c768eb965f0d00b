"""
MongoDB Connection Utility

MongoDB stores:
- Extracted resume text (one document per uploaded resume)
- Uploaded resume files (GridFS bucket "resume_files")

The relational side (profiles, sessions, checks, feedback scores) lives in
PostgreSQL; documents here are referenced from there by id.
"""
import logging

from gridfs import GridFSBucket
from pymongo import MongoClient
from pymongo.database import Database
from pymongo.collection import Collection
from app.core.config import get_settings

settings = get_settings()
logger = logging.getLogger(__name__)

# Global client (connection pooling handled internally by pymongo)
_client: MongoClient = None
_db: Database = None


def get_mongo_client() -> MongoClient:
    """Get or create MongoDB client (singleton pattern)"""
    global _client
    if _client is None:
        _client = MongoClient(
            settings.mongodb_uri,
            serverSelectionTimeoutMS=settings.mongodb_timeout_ms
        )
    return _client


def get_mongo_db() -> Database:
    """Get the documents database"""
    global _db
    if _db is None:
        client = get_mongo_client()
        _db = client[settings.mongodb_db]
    return _db


def get_collection(name: str) -> Collection:
    """Get a specific collection by name (see COLLECTIONS)."""
    db = get_mongo_db()
    return db[name]


def get_resume_bucket() -> GridFSBucket:
    """GridFS bucket holding the uploaded resume files."""
    return GridFSBucket(get_mongo_db(), bucket_name=COLLECTIONS["resume_files"])


def test_mongo_connection() -> bool:
    """
    Test if MongoDB is reachable.
    Returns True if connection successful, False otherwise.
    """
    try:
        client = get_mongo_client()
        # ping command checks connection
        client.admin.command('ping')
        return True
    except Exception as e:
        logger.warning("MongoDB connection failed: %s", e)
        return False


# Collection name constants (avoid typos)
COLLECTIONS = {
    "resume_texts": "resume_texts",
    "resume_files": "resume_files",
}


def init_mongo_indexes():
    """
    Create indexes for better query performance.
    Call this once during app startup.
    """
    db = get_mongo_db()

    db[COLLECTIONS["resume_texts"]].create_index("user_id")
    db[COLLECTIONS["resume_texts"]].create_index("resume_id", unique=True)

    logger.info("MongoDB indexes created successfully")
