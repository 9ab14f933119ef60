"""Process-level I/O: logging and settings files."""
