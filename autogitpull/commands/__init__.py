"""autogitpull CLI commands."""
