"""
Totems exception handling and standardized error codes
"""

from enum import Enum


class TotemsErrorCodes:
    """Standardized error codes for registry operations"""

    # Ticker errors
    INVALID_TICKER_LENGTH = "InvalidTickerLength"
    INVALID_TICKER_CHAR = "InvalidTickerChar"

    # Creation validation errors
    TOTEM_ALREADY_EXISTS = "TotemAlreadyExists"
    NAME_TOO_SHORT = "NameTooShort"
    NAME_TOO_LONG = "NameTooLong"
    DESCRIPTION_TOO_LONG = "DescriptionTooLong"
    EMPTY_IMAGE = "EmptyImage"
    INVALID_SEED = "InvalidSeed"
    INVALID_DECIMALS = "InvalidDecimals"
    TOO_MANY_ALLOCATIONS = "TooManyAllocations"
    TOO_MANY_MODS = "TooManyMods"
    INVALID_ALLOCATION = "InvalidAllocation"

    # Generic input errors
    INVALID_AMOUNT = "InvalidAmount"
    INVALID_ADDRESS = "InvalidAddress"
    INVALID_CURSOR = "InvalidCursor"

    # Accounting errors
    INSUFFICIENT_BALANCE = "InsufficientBalance"
    INSUFFICIENT_FEE = "InsufficientFee"
    ZERO_SUPPLY = "ZeroSupply"
    REFERRER_FEE_TOO_LOW = "ReferrerFeeTooLow"

    # Authorization errors
    UNAUTHORIZED = "Unauthorized"
    CANT_SET_LICENSE = "CantSetLicense"
    MOD_NOT_MINTER = "ModNotMinter"

    # Lookup errors
    TOTEM_NOT_FOUND = "TotemNotFound"
    MOD_NOT_FOUND = "ModNotFound"
    RELAY_NOT_FOUND = "RelayNotFound"
    RELAY_ALREADY_EXISTS = "RelayAlreadyExists"

    # Extension capability errors
    MOD_DOESNT_SUPPORT_HOOK = "ModDoesntSupportHook"
    MOD_MUST_SUPPORT_UNLIMITED_MINTING = "ModMustSupportUnlimitedMinting"
    MOD_NOT_SETUP = "ModNotSetup"
    CANNOT_TRANSFER_TO_UNLIMITED_MINTER = "CannotTransferToUnlimitedMinter"

    # State errors
    TOTEM_NOT_ACTIVE = "TotemNotActive"
    REENTRANT_CALL = "ReentrantCall"


class ErrorCategory(Enum):

    VALIDATION = "validation"
    AUTHORIZATION = "authorization"
    ACCOUNTING = "accounting"
    NOT_FOUND = "not_found"
    CAPABILITY = "capability"
    STATE = "state"


class TotemsException(Exception):

    category = ErrorCategory.VALIDATION

    def __init__(self, error_code: str, message: str):
        self.error_code = error_code
        self.message = message
        super().__init__(f"{error_code}: {message}")

    def to_dict(self):
        return {"error_code": self.error_code, "message": self.message}


# Validation failures


class InvalidTickerLength(TotemsException):
    def __init__(self, length: int):
        self.length = length
        super().__init__(TotemsErrorCodes.INVALID_TICKER_LENGTH, f"Ticker length {length} must be between 1 and 10")


class InvalidTickerChar(TotemsException):
    def __init__(self, char: str):
        self.char = char
        super().__init__(TotemsErrorCodes.INVALID_TICKER_CHAR, f"Invalid ticker character {char!r}")


class NameTooShort(TotemsException):
    def __init__(self, length: int, minimum: int):
        self.length = length
        self.minimum = minimum
        super().__init__(TotemsErrorCodes.NAME_TOO_SHORT, f"Name length {length} is below {minimum}")


class NameTooLong(TotemsException):
    def __init__(self, length: int, maximum: int):
        self.length = length
        self.maximum = maximum
        super().__init__(TotemsErrorCodes.NAME_TOO_LONG, f"Name length {length} exceeds {maximum}")


class DescriptionTooLong(TotemsException):
    def __init__(self, length: int, maximum: int):
        self.length = length
        self.maximum = maximum
        super().__init__(TotemsErrorCodes.DESCRIPTION_TOO_LONG, f"Description length {length} exceeds {maximum}")


class EmptyImage(TotemsException):
    def __init__(self):
        super().__init__(TotemsErrorCodes.EMPTY_IMAGE, "Image cannot be empty")


class InvalidSeed(TotemsException):
    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(TotemsErrorCodes.INVALID_SEED, reason)


class InvalidDecimals(TotemsException):
    def __init__(self, decimals: int):
        self.decimals = decimals
        super().__init__(TotemsErrorCodes.INVALID_DECIMALS, f"Decimals {decimals} must be between 0 and 255")


class TooManyAllocations(TotemsException):
    def __init__(self, count: int, maximum: int):
        self.count = count
        self.maximum = maximum
        super().__init__(TotemsErrorCodes.TOO_MANY_ALLOCATIONS, f"{count} allocations exceed the limit of {maximum}")


class TooManyMods(TotemsException):
    def __init__(self, count: int, maximum: int):
        self.count = count
        self.maximum = maximum
        super().__init__(TotemsErrorCodes.TOO_MANY_MODS, f"{count} mods exceed the limit of {maximum}")


class InvalidAllocation(TotemsException):
    def __init__(self, index: int, reason: str):
        self.index = index
        self.reason = reason
        super().__init__(TotemsErrorCodes.INVALID_ALLOCATION, f"Allocation {index}: {reason}")


class InvalidAmount(TotemsException):
    def __init__(self, amount):
        self.amount = amount
        super().__init__(TotemsErrorCodes.INVALID_AMOUNT, f"Invalid amount: {amount!r}")


class InvalidAddress(TotemsException):
    def __init__(self, address, reason: str = "Invalid address"):
        self.address = address
        super().__init__(TotemsErrorCodes.INVALID_ADDRESS, f"{reason}: {address!r}")


class InvalidCursor(TotemsException):
    def __init__(self, cursor: int, total: int):
        self.cursor = cursor
        self.total = total
        super().__init__(TotemsErrorCodes.INVALID_CURSOR, f"Cursor {cursor} is beyond {total} totems")


# Accounting failures


class InsufficientBalance(TotemsException):
    category = ErrorCategory.ACCOUNTING

    def __init__(self, required: int, available: int):
        self.required = required
        self.available = available
        super().__init__(
            TotemsErrorCodes.INSUFFICIENT_BALANCE,
            f"Insufficient balance: required {required}, available {available}",
        )


class InsufficientFee(TotemsException):
    category = ErrorCategory.ACCOUNTING

    def __init__(self, required: int, provided: int):
        self.required = required
        self.provided = provided
        super().__init__(
            TotemsErrorCodes.INSUFFICIENT_FEE,
            f"Insufficient fee: required {required}, provided {provided}",
        )


class ZeroSupply(TotemsException):
    category = ErrorCategory.ACCOUNTING

    def __init__(self, ticker: str):
        self.ticker = ticker
        super().__init__(TotemsErrorCodes.ZERO_SUPPLY, f"Totem {ticker} would have zero supply")


class ReferrerFeeTooLow(TotemsException):
    category = ErrorCategory.ACCOUNTING

    def __init__(self, fee: int, minimum: int):
        self.fee = fee
        self.minimum = minimum
        super().__init__(TotemsErrorCodes.REFERRER_FEE_TOO_LOW, f"Referrer fee {fee} is below minimum {minimum}")


# Authorization failures


class Unauthorized(TotemsException):
    category = ErrorCategory.AUTHORIZATION

    def __init__(self, caller: str, action: str = None):
        self.caller = caller
        self.action = action
        detail = f" for {action}" if action else ""
        super().__init__(TotemsErrorCodes.UNAUTHORIZED, f"{caller} is not authorized{detail}")


class CantSetLicense(TotemsException):
    category = ErrorCategory.AUTHORIZATION

    def __init__(self, ticker: str):
        self.ticker = ticker
        super().__init__(TotemsErrorCodes.CANT_SET_LICENSE, f"Cannot set license for {ticker}")


class ModNotMinter(TotemsException):
    category = ErrorCategory.AUTHORIZATION

    def __init__(self, mod: str, ticker: str = None):
        self.mod = mod
        self.ticker = ticker
        super().__init__(TotemsErrorCodes.MOD_NOT_MINTER, f"Mod {mod} is not a minter")


# Lookup failures


class TotemNotFound(TotemsException):
    category = ErrorCategory.NOT_FOUND

    def __init__(self, ticker: str):
        self.ticker = ticker
        super().__init__(TotemsErrorCodes.TOTEM_NOT_FOUND, f"Totem {ticker} not found")


class TotemAlreadyExists(TotemsException):
    category = ErrorCategory.NOT_FOUND

    def __init__(self, ticker: str):
        self.ticker = ticker
        super().__init__(TotemsErrorCodes.TOTEM_ALREADY_EXISTS, f"Totem {ticker} already exists")


class ModNotFound(TotemsException):
    category = ErrorCategory.NOT_FOUND

    def __init__(self, mod: str):
        self.mod = mod
        super().__init__(TotemsErrorCodes.MOD_NOT_FOUND, f"Mod {mod} not found")


class RelayNotFound(TotemsException):
    category = ErrorCategory.NOT_FOUND

    def __init__(self, ticker: str, relay: str):
        self.ticker = ticker
        self.relay = relay
        super().__init__(TotemsErrorCodes.RELAY_NOT_FOUND, f"Relay {relay} is not authorized for {ticker}")


class RelayAlreadyExists(TotemsException):
    category = ErrorCategory.NOT_FOUND

    def __init__(self, ticker: str, relay: str, standard: str):
        self.ticker = ticker
        self.relay = relay
        self.standard = standard
        super().__init__(
            TotemsErrorCodes.RELAY_ALREADY_EXISTS,
            f"Relay {relay} or standard {standard!r} already registered for {ticker}",
        )


# Capability mismatches


class ModDoesntSupportHook(TotemsException):
    category = ErrorCategory.CAPABILITY

    def __init__(self, mod: str, hook):
        self.mod = mod
        self.hook = hook
        super().__init__(TotemsErrorCodes.MOD_DOESNT_SUPPORT_HOOK, f"Mod {mod} does not support hook {hook}")


class ModMustSupportUnlimitedMinting(TotemsException):
    category = ErrorCategory.CAPABILITY

    def __init__(self, mod: str):
        self.mod = mod
        super().__init__(
            TotemsErrorCodes.MOD_MUST_SUPPORT_UNLIMITED_MINTING,
            f"Mod {mod} must support unlimited minting",
        )


class ModNotSetup(TotemsException):
    category = ErrorCategory.CAPABILITY

    def __init__(self, mod: str, ticker: str):
        self.mod = mod
        self.ticker = ticker
        super().__init__(TotemsErrorCodes.MOD_NOT_SETUP, f"Mod {mod} is not setup for {ticker}")


class CannotTransferToUnlimitedMinter(TotemsException):
    category = ErrorCategory.CAPABILITY

    def __init__(self, ticker: str, recipient: str):
        self.ticker = ticker
        self.recipient = recipient
        super().__init__(
            TotemsErrorCodes.CANNOT_TRANSFER_TO_UNLIMITED_MINTER,
            f"{recipient} is an unlimited minter of {ticker}",
        )


# State failures


class TotemNotActive(TotemsException):
    category = ErrorCategory.STATE

    def __init__(self, ticker: str):
        self.ticker = ticker
        super().__init__(TotemsErrorCodes.TOTEM_NOT_ACTIVE, f"Totem {ticker} is not active")


class ReentrantCall(TotemsException):
    category = ErrorCategory.STATE

    def __init__(self, operation: str, active_operation: str):
        self.operation = operation
        self.active_operation = active_operation
        super().__init__(
            TotemsErrorCodes.REENTRANT_CALL,
            f"{operation} called while {active_operation} is in progress",
        )
