"""
shopdesk.db

Persistence package (SQLAlchemy async).

Responsibilities:
- Provide ORM models, engine/session setup, repositories, the lookup directory
  used by the request path, and bootstrap seeding.
"""

# Package marker.
