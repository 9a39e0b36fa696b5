#!/usr/bin/env python3
"""
Command-line entry point for fetching verified contract source code.

Commands:
  fetch   Fetch a contract's source from Etherscan and save it locally
  chains  List supported chain IDs
  help    Show usage and examples
"""

import argparse
import logging
import os
import sys
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv
from eth_utils import is_hex_address

from contract_fetcher import CHAINS, ContractWriteError, EtherscanClient, FailureKind, fetch_and_save
from contract_fetcher.constants import API_V2_ENDPOINT, DEFAULT_TIMEOUT


def load_environment(dotenv_path: Optional[Path] = None) -> None:
    """Load .env values; they take priority over inherited shell variables."""
    load_dotenv(dotenv_path, override=True)


# Load environment variables from .env file
load_environment()

# Logger will be configured in main() based on --debug flag
logger = logging.getLogger(__name__)

FAILURE_TIPS = {
    FailureKind.INVALID_API_KEY: "Tip: Check ~/.etherscankey or use -k flag",
    FailureKind.MISSING_API_KEY: "Tip: Check ~/.etherscankey or use -k flag",
    FailureKind.RATE_LIMITED: "Tip: Wait a moment and retry, or use a key with a higher rate limit",
    FailureKind.UNVERIFIED_CONTRACT: "Tip: Contract exists but source not published",
    FailureKind.EOA_ADDRESS: "Tip: This is a wallet address, not a contract",
    FailureKind.UNSUPPORTED_CHAIN: 'Tip: Use "fetch-contract chains" for valid chain IDs',
}

USAGE_TEXT = """
Usage:
  fetch-contract fetch -c <chainId> -a <address> -o <outputPath>
  fetch-contract chains
  fetch-contract help

Options:
  -c, --chain <id>    : Chain ID (required)
  -a, --address <addr>: Contract address (required)
  -o, --output <path> : Output directory (required)
  -k, --api-key <key> : API key (optional, uses ~/.etherscankey)

Examples:
  fetch-contract fetch -c 1 -a 0xA0b86991c6218b36c1d19D4a2e9Eb0cE3606eB48 -o ./usdc
  fetch-contract fetch -c 56 -a 0xcA11bde05977b3631167028862bE2a173976CA11 -o ./multicall3
"""


def normalize_address(address: str) -> str:
    """
    Add a missing 0x prefix and validate the address format.

    Raises:
        ValueError: If the address is not 0x followed by 40 hex characters
    """
    address = address.strip()
    if not address.lower().startswith("0x"):
        address = "0x" + address
        print("⚠️  Auto-adding 0x prefix to address")

    if not is_hex_address(address):
        raise ValueError(
            f"Invalid contract address format: {address}\n"
            "   Expected format: 0x followed by 40 hexadecimal characters\n"
            "   Example: 0xcA11bde05977b3631167028862bE2a173976CA11"
        )
    return address


def configure_logging(debug: bool) -> None:
    if debug:
        logging.basicConfig(
            level=logging.DEBUG,
            format='%(asctime)s - %(levelname)s - %(message)s',
            handlers=[logging.StreamHandler(sys.stderr)]
        )
    else:
        # Disable logging output when debug is False
        logging.basicConfig(
            level=logging.CRITICAL,
            format='%(asctime)s - %(levelname)s - %(message)s',
            handlers=[logging.NullHandler()]
        )


def cmd_fetch(args: argparse.Namespace) -> int:
    try:
        address = normalize_address(args.address)
    except ValueError as e:
        print(f"\n❌ Error: {e}", file=sys.stderr)
        return 1

    output_path = Path(args.output).resolve()
    logger.info(f"Saving chain {args.chain} contract {address} to {output_path}")
    print("Fetching...")
    try:
        with EtherscanClient(api_key=args.api_key, api_url=args.api_url, timeout=args.timeout) as client:
            result = fetch_and_save(client, args.chain, address, output_path)
    except ContractWriteError as e:
        print("Failed to save contract files", file=sys.stderr)
        print(f"\n❌ Error: {e}", file=sys.stderr)
        return 1

    if not result.ok:
        print("Failed to fetch contract", file=sys.stderr)
        print(f"\n❌ Error: {result.message}", file=sys.stderr)
        tip = FAILURE_TIPS.get(result.kind)
        if tip:
            print(tip, file=sys.stderr)
        return 1

    record = result.record
    print("Done")

    if record.is_proxy and record.implementation_address:
        print(f"Proxy → {record.implementation_address}")

    print(f"\nFiles: {len(result.files)}")
    structure = result.first_level_entries(output_path)
    if structure:
        print(f"Structure: {', '.join(structure)}")

    print(f"Contract: {record.contract_name or 'Unknown'}")
    print(f"Compiler: {record.compiler_version or 'Unknown'}")
    if record.optimization_used:
        print(f"Optimization: Yes ({record.runs} runs)")
    else:
        print("Optimization: No")
    return 0


def cmd_chains(args: argparse.Namespace) -> int:
    print("📋 Supported chains:")
    print()
    for chain in CHAINS.values():
        print(f"  {str(chain.chain_id).ljust(10)} - {chain.display_name}")
    return 0


def cmd_help(args: argparse.Namespace) -> int:
    print(USAGE_TEXT)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='fetch-contract',
        description='CLI tool to fetch contract source code from Etherscan - optimized for AI usage',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Environment Variables (can also be set in .env file):
  ETHERSCAN_API_KEY     Etherscan API key
  ETHERSCAN_API_URL     Etherscan v2 endpoint override
  ETHERSCAN_TIMEOUT     Request timeout in seconds (default: 30)

Priority: Command-line arguments > Environment variables > ~/.etherscankey
        """
    )
    parser.add_argument('--version', action='version', version='%(prog)s 1.0.0')
    subparsers = parser.add_subparsers(dest='command')

    fetch_parser = subparsers.add_parser('fetch', help='Fetch contract source code from Etherscan')
    fetch_parser.add_argument(
        '-c', '--chain',
        type=int,
        required=True,
        help='Chain ID (e.g., 1 for Ethereum, 56 for BSC)'
    )
    fetch_parser.add_argument('-a', '--address', required=True, help='Contract address')
    fetch_parser.add_argument('-o', '--output', required=True, help='Local path to save the contract files')
    fetch_parser.add_argument(
        '-k', '--api-key',
        default=os.getenv('ETHERSCAN_API_KEY'),
        help='Etherscan API key (env: ETHERSCAN_API_KEY, defaults to reading from ~/.etherscankey)'
    )
    fetch_parser.add_argument(
        '--api-url',
        default=os.getenv('ETHERSCAN_API_URL') or API_V2_ENDPOINT,
        help='Etherscan v2 API endpoint (env: ETHERSCAN_API_URL)'
    )
    fetch_parser.add_argument(
        '--timeout',
        type=float,
        default=float(os.getenv('ETHERSCAN_TIMEOUT') or DEFAULT_TIMEOUT),
        help='Request timeout in seconds (env: ETHERSCAN_TIMEOUT, default: 30)'
    )
    fetch_parser.add_argument(
        '--debug',
        action='store_true',
        default=False,
        help='Enable debug logging to stderr (default: False)'
    )
    fetch_parser.set_defaults(handler=cmd_fetch)

    chains_parser = subparsers.add_parser('chains', help='List supported chain IDs')
    chains_parser.set_defaults(handler=cmd_chains)

    help_parser = subparsers.add_parser('help', help='Show detailed help and usage examples')
    help_parser.set_defaults(handler=cmd_help)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        print('\n💡 Tip: Use "fetch-contract help" for detailed usage examples')
        return 0

    configure_logging(getattr(args, 'debug', False))
    return args.handler(args)


if __name__ == '__main__':
    sys.exit(main())
