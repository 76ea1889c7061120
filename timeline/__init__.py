"""
Revision Timeline Engine

Reconstructs the edit history of a collaboratively authored document from a
log of insert/delete operations, and replays it as a scrubbable timeline.
"""

__version__ = "0.1.0"
