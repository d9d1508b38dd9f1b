"""
metacoding — scaffold and maintain AI-assistant instruction files.
"""

__version__ = "1.2.0"
