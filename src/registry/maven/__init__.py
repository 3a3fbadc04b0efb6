"""Maven-layout repository access: version discovery and artifact inspection."""
