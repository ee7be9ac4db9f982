"""EBML building blocks: size coding, element headers, value elements, CRC-32 and stream scanning."""

__version__ = "0.1.0"