"""Faucet configuration constants."""
