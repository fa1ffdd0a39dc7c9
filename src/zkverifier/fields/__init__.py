"""fields package.

This package provides the byte codec for BN254 field elements.

Modules:
    - field_codec: Fixed-width (de)serialisation of field elements and endianness conversion between the
        little-endian storage convention and the big-endian host convention.
"""
