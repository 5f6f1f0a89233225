"""Unit tests for individual components in isolation.

Coverage:
    - parsing/: Classification, extraction, truncation and placeholders
    - adapter/: Provider selection, message conversion, envelopes, vision
    - ui/: Session state and markdown rendering
"""
