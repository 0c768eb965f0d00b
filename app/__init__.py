"""
Placement Prep Platform
Backend for students preparing for campus placements.

Architecture:
- PostgreSQL: Structured data (profiles, interview sessions, checks, resume feedback)
- MongoDB: Documents (resume text, resume files in GridFS)
- LLM (OpenAI-compatible API): interview questions, interview scoring, resume review
"""

__version__ = "1.0.0"
