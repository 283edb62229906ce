"""Test fixtures for did:sol decoding."""
