"""Push notification construction and delivery."""
