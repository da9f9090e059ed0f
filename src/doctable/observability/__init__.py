"""
doctable.observability

Observability package.

Responsibilities:
- Structured logging configuration.
"""

# Package marker.


# --- Module Notes -----------------------------------------------------------
# Metrics/tracing hooks can be added here without touching table code.
