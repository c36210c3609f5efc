"""
Tests for the fill engine: collector, labeler, mapper, writer, orchestrator.
"""
