"""Chain registry and Etherscan endpoint constants."""

from types import MappingProxyType

from .models import ChainDescriptor

# Etherscan v2 unified endpoint - a single API key covers every chain
API_V2_ENDPOINT = "https://api.etherscan.io/v2/api"

API_KEY_ENV_VAR = "ETHERSCAN_API_KEY"
API_KEY_FILE_NAME = ".etherscankey"

DEFAULT_TIMEOUT = 30

DEFAULT_SOURCE_FILE = "Contract.sol"
METADATA_FILE_NAME = "metadata.json"

CHAINS = MappingProxyType({
    chain.chain_id: chain
    for chain in (
        ChainDescriptor(chain_id=1, display_name="Ethereum Mainnet"),
        ChainDescriptor(chain_id=56, display_name="BNB Smart Chain"),
        ChainDescriptor(chain_id=137, display_name="Polygon"),
        ChainDescriptor(chain_id=42161, display_name="Arbitrum One"),
        ChainDescriptor(chain_id=10, display_name="Optimism"),
        ChainDescriptor(chain_id=43114, display_name="Avalanche C-Chain"),
        ChainDescriptor(chain_id=250, display_name="Fantom"),
        ChainDescriptor(chain_id=8453, display_name="Base"),
        ChainDescriptor(chain_id=81457, display_name="Blast"),
        ChainDescriptor(chain_id=534352, display_name="Scroll"),
        ChainDescriptor(chain_id=59144, display_name="Linea"),
        ChainDescriptor(chain_id=11155111, display_name="Sepolia Testnet"),
        ChainDescriptor(chain_id=5, display_name="Goerli Testnet"),
    )
})
