"""HTTP surface for the review dispatch service."""
