"""
leveltutor - Interactive edit-a-file tutorial driver

Picks a random level, writes its instructions to a file you edit,
and watches that file until your edits satisfy the level's completion rule.
"""

__version__ = "0.1.0"
