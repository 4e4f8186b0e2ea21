# petadopt/models/post.py
from dataclasses import dataclass, field
from datetime import datetime
from typing import List

from petadopt.utils.datetime_utils import DateTimeUtils

@dataclass
class Post:
    """
    Firestore 'posts' 컬렉션의 문서 구조를 정의하는 데이터클래스.
    publisher_id는 항상 게시글을 작성한 사용자의 ID입니다.
    """
    post_id: str
    publisher_id: str
    publisher: str
    title: str = ""
    content: str = ""
    image_urls: List[str] = field(default_factory=list)
    like_count: int = 0
    created_at: datetime = field(default_factory=DateTimeUtils.now)
    updated_at: datetime = field(default_factory=DateTimeUtils.now)
