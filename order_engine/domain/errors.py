"""Bledy domeny zamowien.

Kazdy blad ma `kind` z zamknietego enuma ErrorKind; warstwa API mapuje po
`kind`, nigdy po tresci komunikatu.
"""

from enum import Enum


class ErrorKind(str, Enum):
    EMPTY_CART = "EMPTY_CART"
    ADDRESS_NOT_FOUND = "ADDRESS_NOT_FOUND"
    INSUFFICIENT_STOCK = "INSUFFICIENT_STOCK"
    INVALID_COUPON = "INVALID_COUPON"
    ORDER_NOT_FOUND = "ORDER_NOT_FOUND"
    ORDER_NOT_CANCELLABLE = "ORDER_NOT_CANCELLABLE"
    INVALID_TRANSITION = "INVALID_TRANSITION"
    GENERATION = "GENERATION"
    VALIDATION = "VALIDATION"


class OrderError(Exception):
    """Bazowy wyjatek dla wszystkich bledow domeny zamowien."""

    kind: ErrorKind


class EmptyCartError(OrderError):
    kind = ErrorKind.EMPTY_CART

    def __init__(self, user_id: str | None = None):
        self.user_id = user_id
        super().__init__("Koszyk jest pusty")


# alias dla kalkulatora cen, ten sam rodzaj bledu
InvalidCartError = EmptyCartError


class AddressNotFoundError(OrderError):
    kind = ErrorKind.ADDRESS_NOT_FOUND

    def __init__(self, address_id: str):
        self.address_id = address_id
        super().__init__(f"Adres {address_id} nie istnieje lub nie nalezy do uzytkownika")


class InsufficientStockError(OrderError):
    kind = ErrorKind.INSUFFICIENT_STOCK

    def __init__(self, product_id: str, requested: int, available: int | None):
        self.product_id = product_id
        self.requested = requested
        self.available = available
        if available is None:
            msg = f"Produkt {product_id} nie istnieje"
        else:
            msg = (
                f"Niewystarczajacy stan produktu {product_id}: "
                f"zadano {requested}, dostepne {available}"
            )
        super().__init__(msg)


class InvalidCouponError(OrderError):
    kind = ErrorKind.INVALID_COUPON

    def __init__(self, code: str, reason: str | None = None):
        self.code = code
        self.reason = reason
        msg = f"Kupon {code} jest nieprawidlowy"
        if reason:
            msg = f"{msg} ({reason})"
        super().__init__(msg)


class OrderNotFoundError(OrderError):
    kind = ErrorKind.ORDER_NOT_FOUND

    def __init__(self, order_id: str):
        self.order_id = order_id
        super().__init__("Zamowienie nie istnieje")


class OrderNotCancellableError(OrderError):
    kind = ErrorKind.ORDER_NOT_CANCELLABLE

    def __init__(self, order_id: str, status: str):
        self.order_id = order_id
        self.status = status
        super().__init__(f"Nie mozna anulowac zamowienia w statusie {status}")


class InvalidTransitionError(OrderError):
    kind = ErrorKind.INVALID_TRANSITION

    def __init__(self, current: str, target: str, reason: str | None = None):
        self.current = current
        self.target = target
        msg = f"Niedozwolona zmiana statusu z {current} na {target}"
        if reason:
            msg = f"{msg}: {reason}"
        super().__init__(msg)


class GenerationError(OrderError):
    kind = ErrorKind.GENERATION

    def __init__(self, message: str = "Nie udalo sie wygenerowac numeru zamowienia"):
        super().__init__(message)


class ValidationError(OrderError):
    kind = ErrorKind.VALIDATION

    def __init__(self, field: str, message: str):
        self.field = field
        super().__init__(f"{field}: {message}")
