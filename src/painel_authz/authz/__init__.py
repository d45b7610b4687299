"""
painel_authz.authz

Authorization core.

Responsibilities:
- Derive capability sets (global roles + per-feature grants) for a user.
- Derive the radar (team/OKR) membership view on top of the admin flag.
- Evaluate permission gates and navigation visibility for consumers.
"""

# Package marker.
