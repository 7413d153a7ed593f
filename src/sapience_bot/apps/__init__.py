"""Command-line applications built on the Sapience clients."""
