"""
MongoDB Service - document storage for resumes.

Collections in this database:
1. resume_texts  - text extracted from each uploaded resume
2. resume_files  - GridFS bucket with the uploaded files themselves

WHY MongoDB for these?
- Resume text varies wildly in size and structure
- Files are blobs; GridFS streams them back without touching PostgreSQL
- PostgreSQL keeps only the ids/URLs and the structured feedback
"""

from datetime import datetime, timezone
from typing import Optional

from bson import ObjectId
from bson.errors import InvalidId
from gridfs.errors import NoFile
from pymongo.collection import Collection

from app.core.config import get_settings
from app.db.mongodb import COLLECTIONS, get_collection, get_resume_bucket


# ============================================================
# RESUME TEXTS COLLECTION
# ============================================================

class ResumeTextService:
    """
    Stores the text extracted from uploaded resumes.
    One document per resumes row.
    """

    def __init__(self):
        self.collection: Collection = get_collection(COLLECTIONS["resume_texts"])

    def insert(self, user_id: int, resume_id: int, resume_text: str, filename: str = None) -> str:
        """
        Insert extracted resume text.

        Returns:
            MongoDB ObjectId as string (stored on the resumes row)
        """
        doc = {
            "user_id": user_id,
            "resume_id": resume_id,
            "resume_text": resume_text,
            "filename": filename,
            "uploaded_at": datetime.now(timezone.utc),
        }
        result = self.collection.insert_one(doc)
        return str(result.inserted_id)

    def delete(self, text_id: str) -> None:
        self.collection.delete_one({"_id": ObjectId(text_id)})


# ============================================================
# RESUME FILES (GridFS)
# ============================================================

class ResumeFileService:
    """
    Blob store for resume files. Each upload gets a public URL served by
    GET /api/resumes/files/{file_id}.
    """

    def __init__(self):
        self.bucket = get_resume_bucket()
        self.base_url = get_settings().public_base_url.rstrip("/")

    def public_url(self, file_id: str) -> str:
        return f"{self.base_url}/api/resumes/files/{file_id}"

    def upload(self, path: str, content: bytes, content_type: str, user_id: int) -> str:
        """Store the file; returns the GridFS id as string."""
        file_id = self.bucket.upload_from_stream(
            path,
            content,
            metadata={"user_id": user_id, "content_type": content_type}
        )
        return str(file_id)

    def delete(self, file_id: str) -> None:
        self.bucket.delete(ObjectId(file_id))

    def download(self, file_id: str) -> Optional[dict]:
        """Return {"filename", "content_type", "content"} or None if missing."""
        try:
            stream = self.bucket.open_download_stream(ObjectId(file_id))
        except (InvalidId, NoFile):
            return None
        metadata = stream.metadata or {}
        return {
            "filename": stream.filename,
            "content_type": metadata.get("content_type", "application/octet-stream"),
            "content": stream.read(),
        }


def get_resume_text_service() -> ResumeTextService:
    return ResumeTextService()


def get_resume_file_service() -> ResumeFileService:
    return ResumeFileService()
