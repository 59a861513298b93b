"""Business services orchestrating parsing, categorization and persistence."""
