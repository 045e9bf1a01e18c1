"""Global enums — values are persisted, must match DB CHECK constraints exactly."""

from enum import Enum


class ErrorKind(str, Enum):
    CONFIGURATION = "CONFIGURATION"
    AUTHORIZATION = "AUTHORIZATION"
    STATE_CONFLICT = "STATE_CONFLICT"
    ADDRESS_MISMATCH = "ADDRESS_MISMATCH"
    INSUFFICIENT_FUNDS = "INSUFFICIENT_FUNDS"
    ADAPTER = "ADAPTER"
    NOT_FOUND = "NOT_FOUND"
    INTERNAL = "INTERNAL"


class PayoutOperation(str, Enum):
    """How a sale price and the payout numeral combine into the reward pool."""
    DIVIDE = "DIVIDE"
    MULTIPLY = "MULTIPLY"


class ListingState(str, Enum):
    ACTIVE = "ACTIVE"
    SOLD = "SOLD"
    CANCELED = "CANCELED"


class OfferState(str, Enum):
    ACTIVE = "ACTIVE"
    ACCEPTED = "ACCEPTED"
    CANCELED = "CANCELED"


class TradeSide(str, Enum):
    SELL = "SELL"
    BUY = "BUY"


class RecordDiscriminator(str, Enum):
    """Tag stored on every persisted record so schema changes are detectable."""
    REWARD_CENTER = "RewardCenter"
    LISTING = "Listing"
    OFFER = "Offer"
