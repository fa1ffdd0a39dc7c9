"""circuits package.

Modules:
    - constraint_system: Minimal rank-1 constraint system used by setup and proving.
    - threshold: Example circuit proving that a secret value is at least a public threshold.
"""
