"""
Back office for the WHIZ POS point-of-sale system.
"""

__version__ = "1.0.0"
