from .headers import init_security

__all__ = ["init_security"]
