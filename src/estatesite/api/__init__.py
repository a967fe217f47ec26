"""
FastAPI REST API for the real-estate marketing site

Provides REST endpoints for the public site and the admin back office:
- Property listings, search and homepage curation
- Blog posts and homepage curation
- Contact, callback, newsletter and guide leads
- Admin authentication and account management
- Health checks
"""
