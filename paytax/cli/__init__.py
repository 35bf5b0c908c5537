"""Pay Tax CLI."""
