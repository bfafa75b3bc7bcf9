"""Discord client adapter."""
