"""Version history use cases."""
