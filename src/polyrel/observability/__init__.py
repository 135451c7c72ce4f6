"""
polyrel.observability

Observability utilities.

Responsibilities:
- Configure structured logging.
"""

# Package marker.
