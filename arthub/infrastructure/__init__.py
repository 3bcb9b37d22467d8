"""Infrastructure layer: chain access, persistence, and leases."""
