"""Give Protocol contribution aggregation and self-reported hours validation."""
