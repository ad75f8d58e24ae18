"""Output layer — renders responses and failures for the CLI."""
