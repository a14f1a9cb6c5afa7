"""
Authentication application.

This app provides the account model and JWT-based authentication for the
GraphQL API.

Key components:
    - User model: Email-based user with a display name, soft-deletable
    - AccountService: Registration, login, logout, profile updates
    - jwt.py: simplejwt token issue, blacklist and validation
    - JWTAuthMiddleware: WebSocket authentication for subscriptions

Usage:
    from authentication.models import User
    from authentication.services import AccountService
"""
