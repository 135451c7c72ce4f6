"""
polyrel.db

Persistence package (SQLAlchemy).

Responsibilities:
- Provide the declarative base, engine/session setup, the polymorphic owner
  column mixin, and the query wrapper used by relation lists.
"""

# Package marker.
