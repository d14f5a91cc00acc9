"""Bondarys Identity - accounts and the session lifecycle.

Layers:
    domain/          # Account entity, value objects, typed changes, repository ports
    application/     # Login, OTP, SSO, registration, token and impersonation flows
    infrastructure/  # SQLAlchemy persistence, SSO strategies, email, audit logging
"""
