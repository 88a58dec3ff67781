"""Domain layer: users, roles and their invariants."""
