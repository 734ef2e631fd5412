from pydantic import BaseModel

MAX_POSTS = 7


class PostSummary(BaseModel):
    image_url: str
    video_preview_url: str | None = None  # only set for videos, equals image_url
    direct_link: str
    date: str


class ProfileSnapshot(BaseModel):
    username: str
    full_name: str = ""
    biography: str = ""
    profile_pic_url: str = ""
    is_private: bool = False
    is_verified: bool = False
    followers_count: int = 0
    following_count: int = 0
    posts_count: int = 0
    posts: list[PostSummary] = []

    @classmethod
    def empty(cls, username: str) -> "ProfileSnapshot":
        """Snapshot with every field but the username at its default."""
        return cls(username=username)
