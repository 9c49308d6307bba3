"""Command implementations behind the ``randkeep`` CLI; each returns an exit code."""
