"""
Timeline CLI - Document revision history replay

Commands:
- timeline replay - Reconstruct the document at an operation index
- timeline log tail/inspect - Normalized operation log
- timeline stats - Copy-paste analysis, editing summary, contributors
- timeline play - Animated terminal playback
"""

__version__ = "0.1.0"
