"""
Schemas module - Request/Response schemas for API endpoints.

Difference from models:
- Models: Internal data structures (dataclasses passed between services)
- Schemas: API contract (what client sends/receives)

All schemas live in app.schemas.schemas.
"""
