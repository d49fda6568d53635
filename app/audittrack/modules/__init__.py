"""
Feature modules live under this package.

Keep module boundaries clean: each module owns its domain logic and routes,
while reusing platform primitives (audit trail, DB session, config).
"""
