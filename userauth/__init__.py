"""
User auth service application code.

This package contains the service-specific implementations:
- auth: registration, login, token-protected profile, maintenance endpoints
- user: identity storage in MongoDB
- media: image uploads
- config: Application settings

Uses generic infrastructure from the common/ package.
"""
