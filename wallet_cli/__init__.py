"""
Descriptor Wallet CLI Package

Command line interface over the descriptor generator.
"""

__version__ = '0.1.0'
