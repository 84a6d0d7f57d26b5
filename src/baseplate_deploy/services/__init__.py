"""
baseplate_deploy.services

Service layer package.

Responsibilities:
- Own the provisioning pass (ordering, logging context).
"""

# Package marker.
