"""Article translation: endpoint client, language fan-out and persistence."""
