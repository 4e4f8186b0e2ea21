# petadopt/services/notification_service.py
import logging
import uuid
from dataclasses import asdict
from firebase_admin import firestore
from typing import Optional

from petadopt.models.notification import Notification, NotificationType
from petadopt.utils.datetime_utils import DateTimeUtils

class NotificationService:
    """
    알림 관련 비즈니스 로직을 담당하는 공용 서비스 클래스.
    입양 신청/수락/거절 및 게시글 좋아요 알림을 생성합니다.
    """
    def __init__(self, db=None):
        self.db = db if db is not None else firestore.client()
        self.notifications_ref = self.db.collection('notifications')
        self.users_ref = self.db.collection('users')

    def create_notification(self, recipient_id: str, sender_id: str, n_type: NotificationType, target_id: str, target_summary: Optional[str] = None) -> Optional[str]:
        """
        알림을 생성하여 Firestore에 저장하고 알림 ID를 반환합니다.
        - 자기 자신에게 보내는 알림은 생성하지 않습니다.
        - 알림 생성 실패는 호출한 작업을 실패시키지 않습니다 (로그만 남김).

        :param recipient_id: 알림을 받을 사용자 ID
        :param sender_id: 알림을 유발한 사용자 ID
        :param n_type: 알림 유형 (NotificationType Enum)
        :param target_id: 알림의 대상이 되는 객체 ID (request_id, post_id 등)
        :param target_summary: 알림에 표시될 요약 텍스트 (예: 반려동물 이름)
        """
        if not recipient_id or recipient_id == sender_id:
            return None

        try:
            # 발신자 정보 조회 (알림에 표시될 이름, 프로필 이미지)
            sender_doc = self.users_ref.document(sender_id).get()
            if not sender_doc.exists:
                logging.warning(f"알림 생성 실패: 발신자(sender)를 찾을 수 없음 (ID: {sender_id})")
                return None

            sender_info = sender_doc.to_dict()
            sender_data = {
                "user_id": sender_id,
                "display_name": sender_info.get('display_name'),
                "photo_url": sender_info.get('photo_url')
            }

            notification = Notification(
                notification_id=str(uuid.uuid4()),
                recipient_id=recipient_id,
                sender=sender_data,
                type=n_type,
                target_id=target_id,
                target_summary=target_summary
            )

            # Enum 멤버를 문자열 값으로 변환하여 저장
            notification_dict = asdict(notification)
            notification_dict['type'] = notification.type.value

            self.notifications_ref.document(notification.notification_id).set(DateTimeUtils.for_firestore(notification_dict))
            logging.info(f"{n_type.value} 알림 생성 완료: {sender_id} -> {recipient_id}")
            return notification.notification_id

        except Exception as e:
            logging.error(f"알림 생성 중 오류 발생: {e}", exc_info=True)
            return None
