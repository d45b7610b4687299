"""
painel_authz.services

Service-layer package.

Responsibilities:
- Own transaction boundaries for write paths (permission administration).
"""

# Package marker.
