"""MovieHub.

Searches several movie databases at once, merges what they return into one record per
title with a cross-source rating, and answers natural language movie questions through
an intent-driven tool workflow.
"""

__version__ = "0.1.0"
