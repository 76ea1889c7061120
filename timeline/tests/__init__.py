"""
Test suite for the revision timeline engine.

Focus areas:
- Normalization of raw log entries
- Replay determinism and prefix consistency
- Statistics over normalized operations
- Playback state machine
"""
