"""Tic-tac-toe singing tournament engine for two karaoke teams."""

__version__ = "0.1.0"
