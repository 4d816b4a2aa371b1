#!/usr/bin/env python3
"""Check a chain connection and log the faucet balance."""
import argparse
import asyncio
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from loguru import logger

from faucet.chains import ChainError, create_chain, supported_networks, to_decimal
from faucet.utils.logging import setup_logging


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("network", choices=supported_networks())
    parser.add_argument("--token", default="ETH", help="Token symbol (default: ETH)")
    parser.add_argument("--address", help="Address to check (default: faucet address)")
    parser.add_argument("--policy", help="Policy file overriding the bundled config.json")
    parser.add_argument("--log-level", default="INFO")
    return parser.parse_args()


async def main() -> int:
    args = parse_args()
    setup_logging(args.log_level)

    try:
        async with await create_chain(args.network, policy_path=args.policy) as chain:
            address = args.address or chain.config.signer_address
            balance = await chain.get_balance(address, args.token)
            decimals = chain.config.get_token_decimals(args.token)
            logger.info(
                f"{chain.chain_name}/{chain.network_name} {args.token.upper()} "
                f"balance of {chain.normalize_address(address)}: {to_decimal(balance, decimals)}"
            )
            drip = chain.config.get_drip_amount(args.token)
            logger.info(f"Drip amount: {drip} {args.token.upper()}")
    except ChainError as e:
        logger.error(f"Check failed: {e}")
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
