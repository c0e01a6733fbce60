"""External services used by the filter."""
