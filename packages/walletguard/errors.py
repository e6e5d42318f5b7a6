class WalletGuardError(Exception):
    """Base class for walletguard errors."""


class ConfigError(WalletGuardError):
    pass


class MalformedTransactionError(WalletGuardError):
    pass


class LedgerFetchError(WalletGuardError):
    """The ledger provider could not return a wallet's history."""


class StorageError(WalletGuardError):
    pass


class SchedulerError(WalletGuardError):
    pass
