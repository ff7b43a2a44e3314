"""Value objects and record type capabilities."""
