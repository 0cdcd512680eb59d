"""Generate Nethereum contract services for Unity projects."""

__version__ = "0.1.0"
