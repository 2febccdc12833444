"""
TokenVote Exceptions

Package-wide exception roots. Governance and credential errors subclass
these in their own modules.
"""


class TokenVoteException(Exception):
    """Base exception for TokenVote."""
    pass


class InvalidIdentityError(TokenVoteException):
    """Identity (holder / administrator / organiser address) is missing."""
    pass


class ConfigurationError(TokenVoteException, ValueError):
    """Configuration error."""
    pass
