"""Git and GitHub CLI wrappers."""
