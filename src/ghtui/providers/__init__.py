"""Data providers feeding the pull request list."""
