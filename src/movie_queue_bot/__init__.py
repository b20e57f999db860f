"""Movie Queue Bot.

A chat assistant that keeps a persisted queue of requested movies, looks
movies up on TMDb and adds or removes queue entries when mentioned.
"""

__version__ = "0.1.0"
__author__ = "Movie Queue Bot Team"
