"""Detection, scoring and session components."""
