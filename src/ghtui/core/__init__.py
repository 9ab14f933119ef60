"""Terminal-independent runtime: commands, dispatch, pagination."""
