"""Customer document uploads and their review lifecycle."""
