"""Output: rich renderers and JSON formatting for ServiceResult."""
