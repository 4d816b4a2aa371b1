"""
Multi-chain testnet faucet client.

Provides a uniform Chain contract for distributing testnet tokens and
concrete backends for Starknet and Ethereum Sepolia.
"""

__version__ = "1.0.18"
