"""
Services layer - Business logic goes here.
Keep services focused on specific domains (issues, users, admins, storage).

DESIGN PRINCIPLE:
- Services contain business logic, NOT routes
- Services raise app.core.errors types; routes only translate them
- Each service exposes a lazily created module-level singleton
"""
