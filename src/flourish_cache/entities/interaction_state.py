"""Per-user interaction state entity."""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class UserInteractionState:
    """Likes and follows belonging to one authenticated user.

    Attributes:
        user_id: Owner of the state
        liked_media_ids: IDs of media the user has liked
        followed_creators: Creator names the user follows
    """

    user_id: str
    liked_media_ids: frozenset[str] = field(default_factory=frozenset)
    followed_creators: frozenset[str] = field(default_factory=frozenset)

    def has_liked(self, media_id: str) -> bool:
        return media_id in self.liked_media_ids

    def is_following(self, creator_name: str) -> bool:
        return creator_name in self.followed_creators
