"""
NoteVault Backend - Personal Notes with Version History

Notes with password protection, automatic version history and real-time
change notifications.

Version: 1.0.0
"""

__version__ = "1.0.0"
