"""
RestBuddy: Demo Models
========================

What:  The models the bundled application (`restbuddy.main:app`) serves.
How:   Importing this package registers both tables on `Base.metadata`;
       `default_registry()` exposes them as resources.

    users   → User
    posts   → Post
"""

from restbuddy.models.post import Post
from restbuddy.models.user import User
from restbuddy.registry import ResourceRegistry


def default_registry() -> ResourceRegistry:
    registry = ResourceRegistry()
    registry.register(User)
    registry.register(Post)
    return registry


__all__ = ["Post", "User", "default_registry"]
