"""One-shot prediction trading bot for Sapience markets on Base."""
