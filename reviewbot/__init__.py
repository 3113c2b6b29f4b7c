"""
AI pull request review bot.

Parses a pull request diff, asks a language model to review every hunk and
posts the validated findings as inline review comments.
"""

__version__ = "1.0.0"
