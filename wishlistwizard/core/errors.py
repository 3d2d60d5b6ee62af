class WishlistWizardError(Exception):
    """Base class for all Wishlist Wizard failures."""


class NoWishlistUrlError(WishlistWizardError):
    """No usable wishlist URL was supplied. Fatal to the whole run."""


class WishlistAbort(WishlistWizardError):
    """Stops processing of one wishlist URL; the run moves on to the next."""

    def __init__(self, message: str, url: str = ""):
        super().__init__(message)
        self.url = url


class ListNameUnresolvedError(WishlistAbort):
    pass


class CaptchaRecoveryError(WishlistAbort):
    pass


class MalformedLinkError(WishlistWizardError, ValueError):
    """A product href could not be turned into an absolute URL."""
