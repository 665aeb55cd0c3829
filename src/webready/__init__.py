"""WebReady: responsive web image derivatives and markup."""

__version__ = "0.1.0"
