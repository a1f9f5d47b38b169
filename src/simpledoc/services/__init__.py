"""Services: planning, applying, and the check/migrate operations."""
