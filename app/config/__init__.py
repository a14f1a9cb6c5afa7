# =============================================================================
# Django Project Configuration Package
# =============================================================================
# Settings, URLs, the ASGI application and the GraphQL schema/transport
# wiring (schema.py, graphql.py, routing.py).
# =============================================================================
