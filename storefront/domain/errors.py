# storefront/domain/errors.py


class StorefrontError(Exception):
    """Bazowy wyjatek domeny sklepu."""


class NotFoundError(StorefrontError, LookupError):
    pass


class CartError(StorefrontError, ValueError):
    pass


class OrderError(StorefrontError, ValueError):
    pass


class CartSyncError(StorefrontError, RuntimeError):
    """Synchronizacja koszyka lokalnego z koszykiem serwera nie powiodla sie.

    Koszyk lokalny zostaje nietkniety, wiec kolejne logowanie moze ponowic sync.
    """


class GuestOrderError(StorefrontError, RuntimeError):
    """Zamowienie goscia nie zostalo utworzone po udanej platnosci."""

    def __init__(self, message: str, payment_reference: str | None = None):
        super().__init__(message)
        self.payment_reference = payment_reference
