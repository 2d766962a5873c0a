"""
Drawn TicTacToe
===============
TicTacToe where you draw your O or X by hand.
A trained classifier decides which symbol was drawn, and it is placed
on the board in the cell you picked.
"""

__version__ = "1.0.0"
