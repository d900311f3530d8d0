"""HTTP primitives: headers, the engine-level request, and responses."""

# Verbs a route may be registered for
METHODS: frozenset[str] = frozenset(
    {"GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"}
)
