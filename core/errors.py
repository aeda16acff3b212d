# core/errors.py


class CryptofolioError(Exception):
    """Base class for every error raised by cryptofolio."""


class ConfigError(CryptofolioError):
    pass


class ValidationError(CryptofolioError, ValueError):
    """Caller supplied an amount or price that cannot be booked."""


class NotFoundError(CryptofolioError, KeyError):
    def __init__(self, position_id: str):
        super().__init__(position_id)
        self.position_id = position_id

    def __str__(self) -> str:
        return f"No position with id {self.position_id!r}"


class PersistenceError(CryptofolioError):
    """Reading or writing the preference store failed."""


# ---------- market data ----------

class MarketDataError(CryptofolioError):
    pass


class NetworkError(MarketDataError):
    """Transport failure: DNS, refused connection, timeout."""


class HTTPStatusError(MarketDataError):
    def __init__(self, status_code: int, message: str = ""):
        self.status_code = status_code
        self.message = message
        super().__init__(f"HTTP {status_code}: {message}" if message else f"HTTP {status_code}")


class DecodeError(MarketDataError):
    """Response body was not the JSON shape we expect."""
