"""WalletGuard: transaction risk checks and wallet history indexing."""

__version__ = "0.1.0"
