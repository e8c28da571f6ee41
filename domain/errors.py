# domain/errors.py

from typing import Dict, List, Optional


class StorefrontError(Exception):
    """
    Base class for recoverable storefront failures.

    `message_key` points into the string table in utils/i18n.py so pages can
    show a localized message.
    """
    message_key = "error.generic"

    def __init__(self, message: str = "", *, message_key: Optional[str] = None):
        super().__init__(message or self.__class__.__name__)
        self.message = message or self.__class__.__name__
        if message_key:
            self.message_key = message_key


class KitConflict(StorefrontError):
    message_key = "error.kitConflict"


class ValidationError(StorefrontError):
    message_key = "error.validation"


class Unauthenticated(StorefrontError):
    message_key = "error.unauthenticated"


class CatalogLoadFailure(StorefrontError):
    message_key = "error.catalogLoad"


class CheckoutInProgress(StorefrontError):
    message_key = "error.checkoutInProgress"


class StorageCorruption(StorefrontError):
    message_key = "error.storageCorruption"


class CheckoutPartialFailure(StorefrontError):
    message_key = "error.checkoutPartial"

    def __init__(self, succeeded: List[str], failed: Dict[str, str]):
        super().__init__(
            f"Orders created for {len(succeeded)} store(s), "
            f"failed for {len(failed)}: {', '.join(failed)}"
        )
        self.succeeded = succeeded
        self.failed = failed
