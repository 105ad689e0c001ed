"""
IO module for binary stream handling.
"""

from .binary_stream import BinaryStream, BinaryReaderError

__all__ = ['BinaryStream', 'BinaryReaderError']
