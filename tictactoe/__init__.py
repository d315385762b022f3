"""
Tic-tac-toe with move history and a greedy computer opponent.
"""

__version__ = "1.0.0"
