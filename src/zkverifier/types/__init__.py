"""types package.

Modules:
    - proof_package: Packaging modes and the packaged proof submitted to the host.
"""
