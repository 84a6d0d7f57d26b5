"""
baseplate_deploy.observability

Observability package.

Responsibilities:
- Structured logging configuration.
- Pass-scoped context propagation for consistent log enrichment.
"""

# Package marker.
