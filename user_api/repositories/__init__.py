from .user import UserRepository

__all__ = ["UserRepository"]
