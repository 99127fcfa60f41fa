"""Individual CLI command implementations."""
