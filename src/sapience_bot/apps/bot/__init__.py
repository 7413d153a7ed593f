"""One-shot Sapience trading bot.

Find the soonest-closing public market, predict its outcome with a
language model, quote a position for a fixed wager and, when a signing
key is configured, open the position on-chain.
"""
