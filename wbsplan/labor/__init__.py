"""Labor-hours aggregation over time-entry logs."""
