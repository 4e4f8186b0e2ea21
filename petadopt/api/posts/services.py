# petadopt/api/posts/services.py
import logging
import uuid
from dataclasses import asdict
from typing import Optional, Dict, Any, Tuple, List
from firebase_admin import firestore
from firebase_admin.firestore import Transaction

from petadopt.models.post import Post
from petadopt.models.notification import NotificationType
from petadopt.services.notification_service import NotificationService
from petadopt.utils.datetime_utils import DateTimeUtils

class PostService:
    """
    커뮤니티 게시글 관련 비즈니스 로직을 담당하는 서비스 클래스.
    게시글 CRUD와 좋아요 토글(트랜잭션)을 포함합니다.
    """
    def __init__(self, db=None, notification_service: Optional[NotificationService] = None):
        self.db = db if db is not None else firestore.client()
        self.posts_ref = self.db.collection('posts')
        self.users_ref = self.db.collection('users')
        self.likes_ref = self.db.collection('likes') # 좋아요 문서를 별도 컬렉션으로 관리
        self.notification_service = notification_service

    def create_post(self, user_id: str, post_data: Dict[str, Any]) -> Dict[str, Any]:
        """새로운 게시글을 생성합니다. 작성자 ID는 항상 요청한 사용자 ID로 설정됩니다."""
        try:
            user_doc = self.users_ref.document(user_id).get()
            display_name = user_doc.to_dict().get('display_name') if user_doc.exists else None

            post_id = str(uuid.uuid4())
            now = DateTimeUtils.now()
            new_post = Post(
                post_id=post_id,
                publisher_id=user_id,
                publisher=display_name or user_id,
                title=post_data.get('title', ''),
                content=post_data.get('content', ''),
                image_urls=post_data.get('image_urls', []),
                created_at=now, updated_at=now
            )
            post_dict = DateTimeUtils.for_firestore(asdict(new_post))
            self.posts_ref.document(post_id).set(post_dict)
            logging.info(f"Post {post_id} created by {user_id}")
            return post_dict
        except Exception as e:
            logging.error(f"게시글 생성 실패 (user_id: {user_id}): {e}", exc_info=True)
            raise

    def get_posts(self, current_user_id: Optional[str], limit: int, cursor: Optional[str]) -> Tuple[List[Dict[str, Any]], Optional[str]]:
        """전체 게시글을 최신순으로 페이지네이션하여 조회합니다."""
        query = self.posts_ref.order_by("created_at", direction=firestore.Query.DESCENDING)
        if cursor:
            cursor_doc = self.posts_ref.document(cursor).get()
            if cursor_doc.exists:
                query = query.start_after(cursor_doc)

        posts = []
        last_doc_id = None
        for doc in query.limit(limit).stream():
            posts.append(doc.to_dict())
            last_doc_id = doc.id
        # 페이지가 가득 찼을 때만 다음 페이지가 있을 수 있습니다.
        if len(posts) < limit:
            last_doc_id = None
        self._mark_liked(current_user_id, posts)
        return posts, last_doc_id

    def get_posts_by_user_id(self, author_id: str, current_user_id: Optional[str] = None) -> List[Dict[str, Any]]:
        """특정 사용자가 작성한 게시글 목록을 최신순으로 조회합니다."""
        try:
            docs = self.posts_ref.where('publisher_id', '==', author_id).stream()
            posts = sorted((doc.to_dict() for doc in docs), key=lambda p: p['created_at'], reverse=True)
            self._mark_liked(current_user_id, posts)
            return posts
        except Exception as e:
            logging.error(f"사용자 게시글 목록 조회 실패 (author_id: {author_id}): {e}", exc_info=True)
            raise

    def get_post_by_id(self, post_id: str, current_user_id: Optional[str] = None) -> Optional[Dict[str, Any]]:
        doc = self.posts_ref.document(post_id).get()
        if not doc.exists:
            return None
        post_data = doc.to_dict()
        self._mark_liked(current_user_id, [post_data])
        return post_data

    def update_post(self, post_id: str, user_id: str, update_data: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        """[작성자 전용] 게시글의 제목/내용/이미지를 수정합니다. 권한이 없거나 게시글이 없으면 None."""
        post_ref = self.posts_ref.document(post_id)
        doc = post_ref.get()
        if not doc.exists or doc.to_dict().get('publisher_id') != user_id:
            return None

        update_data = dict(update_data, updated_at=DateTimeUtils.now())
        post_ref.update(DateTimeUtils.for_firestore(update_data))
        return post_ref.get().to_dict()

    def delete_post(self, post_id: str, user_id: str) -> bool:
        """[작성자 전용] 게시글을 삭제합니다."""
        post_ref = self.posts_ref.document(post_id)
        doc = post_ref.get()
        if not doc.exists or doc.to_dict().get('publisher_id') != user_id:
            return False
        post_ref.delete()
        logging.info(f"Post {post_id} deleted by {user_id}")
        return True

    def toggle_post_like(self, user_id: str, post_id: str) -> bool:
        """
        [트랜잭션] 게시글 좋아요를 누르거나 취소합니다.
        - `likes` 컬렉션에 `post_{user_id}_{post_id}` 문서를 생성/삭제합니다.
        - `posts` 문서의 `like_count`를 원자적으로 증가/감소시킵니다.
        :return: 토글 후 좋아요 상태 (True면 좋아요)
        """
        transaction = self.db.transaction()
        like_ref = self.likes_ref.document(f"post_{user_id}_{post_id}")
        post_ref = self.posts_ref.document(post_id)

        @firestore.transactional
        def _toggle_like_in_transaction(transaction: Transaction) -> Tuple[bool, Dict[str, Any]]:
            like_doc = like_ref.get(transaction=transaction)
            post_doc = post_ref.get(transaction=transaction)

            if not post_doc.exists:
                raise ValueError("게시글을 찾을 수 없습니다.")

            if like_doc.exists:
                transaction.delete(like_ref)
                transaction.update(post_ref, {'like_count': firestore.Increment(-1)})
                return False, post_doc.to_dict()

            transaction.set(like_ref, {'user_id': user_id, 'post_id': post_id, 'created_at': DateTimeUtils.now()})
            transaction.update(post_ref, {'like_count': firestore.Increment(1)})
            return True, post_doc.to_dict()

        try:
            is_liked, post_data = _toggle_like_in_transaction(transaction)
        except Exception as e:
            logging.error(f"게시글 좋아요 토글 실패 (user_id: {user_id}, post_id: {post_id}): {e}", exc_info=True)
            raise

        if is_liked and self.notification_service:
            self.notification_service.create_notification(
                recipient_id=post_data.get('publisher_id'),
                sender_id=user_id,
                n_type=NotificationType.POST_LIKE,
                target_id=post_id,
                target_summary=(post_data.get('title') or '')[:50]
            )
        return is_liked

    def _mark_liked(self, user_id: Optional[str], posts: List[Dict[str, Any]]) -> None:
        """게시글 목록에 현재 사용자의 좋아요 여부(is_liked)를 표시합니다."""
        for post in posts:
            post['is_liked'] = bool(user_id) and self.likes_ref.document(f"post_{user_id}_{post['post_id']}").get().exists
