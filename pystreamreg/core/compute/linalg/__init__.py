"""
Linear algebra storage for PyStreamReg.

The updating regression works on compressed triangular factors rather
than dense matrices; this package holds the packed layouts it uses.

Submodules:
    packed: Packed strictly-upper-triangular and symmetric storage
"""

from pystreamreg.core.compute.linalg.packed import (
    PackedUpperTriangular,
    packed_symmetric_size,
    symmetric_index,
    unpack_symmetric,
)

__all__ = [
    "PackedUpperTriangular",
    "packed_symmetric_size",
    "symmetric_index",
    "unpack_symmetric",
]
