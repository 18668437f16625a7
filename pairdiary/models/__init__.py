"""PairDiary Database Models."""

from pairdiary.models.user import AuthSession, User
from pairdiary.models.pair import Friendship, FriendshipStatus, Pair
from pairdiary.models.diary import Diary, PublicDiary

__all__ = [
    "User",
    "AuthSession",
    "Pair",
    "Friendship",
    "FriendshipStatus",
    "Diary",
    "PublicDiary",
]
