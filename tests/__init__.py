"""Test suite for the ArtHub settlement service."""
