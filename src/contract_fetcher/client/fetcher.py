"""Public Etherscan client composed from focused mixins."""

from .base import EtherscanClientBaseMixin
from .classification import EtherscanClientClassificationMixin
from .bytecode import EtherscanClientBytecodeMixin
from .source import EtherscanClientSourceMixin


class EtherscanClient(
    EtherscanClientBaseMixin,
    EtherscanClientBytecodeMixin,
    EtherscanClientClassificationMixin,
    EtherscanClientSourceMixin,
):
    """Composite client for fetching and classifying verified source."""

    pass
