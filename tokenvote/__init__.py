"""
TokenVote Package

Core imports are lazily loaded so that importing a submodule does not pull
in the whole governance stack. For direct module access, import from
submodules:

    from tokenvote.governance import Governance, ProposalStatus
    from tokenvote.tokens import CredentialToken
    from tokenvote.config import load_config
"""

__version__ = "0.1.0"


def __getattr__(name):
    """Lazy module loading."""
    if name == 'Governance':
        from .governance import Governance
        return Governance
    elif name == 'CredentialToken':
        from .tokens import CredentialToken
        return CredentialToken
    elif name == 'load_config':
        from .config import load_config
        return load_config
    raise AttributeError(f"module 'tokenvote' has no attribute {name!r}")

__all__ = ['Governance', 'CredentialToken', 'load_config']
