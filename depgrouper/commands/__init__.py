"""Command implementations for depgrouper."""
