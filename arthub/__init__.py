"""ArtHub collect-and-settle service."""
