"""Unified error codes and custom exceptions.

Every error carries a stable numeric code and an ErrorKind so that callers
(CLI, indexers, API clients) can branch on it instead of parsing messages.

Error code ranges:
  1xxx: Configuration
  2xxx: Authorization
  3xxx: State conflict
  4xxx: Address mismatch
  5xxx: Insufficient funds
  6xxx: Auction house adapter
  7xxx: Not found
  9xxx: System
"""

from src.rc_common.enums import ErrorKind


class AppError(Exception):
    """Base application error."""

    kind: ErrorKind = ErrorKind.INTERNAL

    def __init__(
        self,
        code: int,
        message: str,
        http_status: int = 500,
    ) -> None:
        self.code = code
        self.message = message
        self.http_status = http_status
        super().__init__(message)


# --- 1xxx: Configuration ---

class ConfigurationError(AppError):
    kind = ErrorKind.CONFIGURATION

    def __init__(self, code: int, message: str) -> None:
        super().__init__(code, message, 422)


class InvalidBasisPointsError(ConfigurationError):
    def __init__(self, basis_points: int) -> None:
        super().__init__(
            1001, f"Seller reward payout basis points must be <= 10000, got {basis_points}"
        )


class ZeroPayoutNumeralError(ConfigurationError):
    def __init__(self) -> None:
        super().__init__(1002, "Payout numeral must be non-zero")


class InvalidPriceError(ConfigurationError):
    def __init__(self, price: int) -> None:
        super().__init__(1003, f"Price must be a positive u64, got {price}")


class InvalidTokenSizeError(ConfigurationError):
    def __init__(self, token_size: int) -> None:
        super().__init__(1004, f"Token size must be a positive u64, got {token_size}")


class InvalidAmountError(ConfigurationError):
    def __init__(self, amount: int) -> None:
        super().__init__(1005, f"Amount must be a positive u64, got {amount}")


# --- 2xxx: Authorization ---

class AuthorizationError(AppError):
    kind = ErrorKind.AUTHORIZATION

    def __init__(self, code: int, message: str) -> None:
        super().__init__(code, message, 403)


class SignerMismatchError(AuthorizationError):
    def __init__(self, role: str, expected: str, signer: str) -> None:
        super().__init__(
            2001, f"Signer {signer} is not the {role} (expected {expected})"
        )


# --- 3xxx: State conflict ---

class StateConflictError(AppError):
    kind = ErrorKind.STATE_CONFLICT

    def __init__(self, code: int, message: str) -> None:
        super().__init__(code, message, 409)


class ListingNotActiveError(StateConflictError):
    def __init__(self, address: str, state: str) -> None:
        super().__init__(3001, f"Listing {address} is {state}, expected ACTIVE")


class OfferNotActiveError(StateConflictError):
    def __init__(self, address: str, state: str) -> None:
        super().__init__(3002, f"Offer {address} is {state}, expected ACTIVE")


class DuplicateActiveListingError(StateConflictError):
    def __init__(self, address: str) -> None:
        super().__init__(3003, f"An active listing already exists at {address}")


class DuplicateActiveOfferError(StateConflictError):
    def __init__(self, address: str) -> None:
        super().__init__(3004, f"An active offer already exists at {address}")


class PriceMismatchError(StateConflictError):
    def __init__(self, listing_price: int, offer_price: int) -> None:
        super().__init__(
            3005, f"Listing price {listing_price} does not match offer price {offer_price}"
        )


class RecordMismatchError(StateConflictError):
    def __init__(self, detail: str) -> None:
        super().__init__(3006, f"Listing and offer do not match: {detail}")


class RewardCenterExistsError(StateConflictError):
    def __init__(self, address: str) -> None:
        super().__init__(3007, f"Reward center already exists: {address}")


class RecordExistsError(StateConflictError):
    def __init__(self, record_type: str, address: str) -> None:
        super().__init__(3008, f"{record_type} already exists: {address}")


# --- 4xxx: Address mismatch ---

class AddressMismatchError(AppError):
    kind = ErrorKind.ADDRESS_MISMATCH

    def __init__(self, label: str, expected: str, supplied: str) -> None:
        super().__init__(
            4001, f"Address mismatch for {label}: expected {expected}, got {supplied}", 400
        )


# --- 5xxx: Funds ---

class InsufficientFundsError(AppError):
    kind = ErrorKind.INSUFFICIENT_FUNDS

    def __init__(self, required: int, available: int) -> None:
        super().__init__(
            5001,
            f"Insufficient funds: required {required}, available {available}",
            422,
        )


# --- 6xxx: Auction house ---

class AdapterError(AppError):
    kind = ErrorKind.ADAPTER

    def __init__(self, detail: str) -> None:
        super().__init__(6001, f"Auction house rejected operation: {detail}", 502)


# --- 7xxx: Not found ---

class RecordNotFoundError(AppError):
    kind = ErrorKind.NOT_FOUND

    def __init__(self, record_type: str, address: str) -> None:
        super().__init__(7001, f"{record_type} not found: {address}", 404)


# --- 9xxx: System ---

class InternalError(AppError):
    def __init__(self, detail: str = "Internal server error") -> None:
        super().__init__(9002, detail, 500)
