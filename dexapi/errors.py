"""Error classes for the gateway.

Each error maps to one HTTP outcome at the endpoint boundary.
"""


class DexApiError(Exception):
    """Base error for gateway operations."""

    pass


class ValidationError(DexApiError):
    """Missing or malformed request input (400)."""

    pass


class DuplicateTokenError(DexApiError):
    """A token with this symbol is already registered (400)."""

    def __init__(self, symbol: str) -> None:
        super().__init__("Token with this symbol already exists")
        self.symbol = symbol


class TokenNotFoundError(DexApiError):
    """No registered token matches the symbol (404)."""

    def __init__(self, symbol: str) -> None:
        super().__init__("Token not found")
        self.symbol = symbol


class StorageError(DexApiError):
    """The document store rejected or failed an operation (500)."""

    pass


class CollaboratorError(DexApiError):
    """The router collaborator, chain RPC or token list failed."""

    pass


class NoRouteError(CollaboratorError):
    """The router found no viable trade for the pair and amount."""

    pass
