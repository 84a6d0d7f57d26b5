"""
baseplate_deploy.clients

Provider client package.

Responsibilities:
- Provide client interfaces for the external systems a deployment touches (Nomad, Vault).
"""

# Package marker.


# --- Module Notes -----------------------------------------------------------
# Registrants should depend on this boundary (not on raw HTTP calls directly).
