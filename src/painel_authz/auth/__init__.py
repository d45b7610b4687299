"""
painel_authz.auth

Authentication package.

Responsibilities:
- JWT helpers and validation (identity provider).
- FastAPI dependencies that turn a bearer token into a `UserIdentity` and gate
  routes on resolved capabilities.
"""

# Package marker.
