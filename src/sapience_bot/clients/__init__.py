"""API clients for the Sapience protocol and the language-model predictor."""
