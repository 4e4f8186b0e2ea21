# petadopt/conftest.py
"""
pytest 공용 픽스처.

실제 Firestore 대신 메모리 위에서 동작하는 FakeFirestore를 서비스에 주입합니다.
트랜잭션은 쓰기를 모아두었다가 함수가 정상 종료될 때만 한 번에 반영하고,
예외가 발생하면 아무것도 반영하지 않습니다 (Firestore 트랜잭션과 같은 원자성).

사용법: python -m pytest petadopt -v
"""
import copy
import itertools

import pytest
from firebase_admin import firestore
from google.api_core.exceptions import NotFound

from petadopt import create_app
from petadopt.api.adoptions.services import AdoptionService
from petadopt.api.pets.services import PetService
from petadopt.api.posts.services import PostService
from petadopt.api.users.services import UserService
from petadopt.services.notification_service import NotificationService

_MISSING = object()


def _apply_update(current, update_data):
    """update() 필드 값을 현재 문서에 반영합니다. Increment는 기존 값에 더합니다."""
    for key, value in update_data.items():
        if isinstance(value, firestore.Increment):
            current[key] = current.get(key, 0) + value.value
        else:
            current[key] = copy.deepcopy(value)


class FakeSnapshot:
    def __init__(self, reference, data):
        self.reference = reference
        self.id = reference.id
        self._data = data

    @property
    def exists(self):
        return self._data is not None

    def get(self, field):
        return self._data.get(field) if self._data else None

    def to_dict(self):
        return copy.deepcopy(self._data) if self._data is not None else None


class FakeDocumentReference:
    def __init__(self, db, collection_name, doc_id):
        self._db = db
        self._collection_name = collection_name
        self.id = doc_id

    @property
    def _docs(self):
        return self._db.store.setdefault(self._collection_name, {})

    def get(self, transaction=None):
        if transaction is not None:
            transaction._check_read()
        return FakeSnapshot(self, copy.deepcopy(self._docs.get(self.id)))

    def set(self, data):
        self._db.write_count += 1
        self._docs[self.id] = copy.deepcopy(data)

    def update(self, data):
        if self.id not in self._docs:
            raise NotFound(f"No document to update: {self._collection_name}/{self.id}")
        self._db.write_count += 1
        _apply_update(self._docs[self.id], data)

    def delete(self):
        self._db.write_count += 1
        self._docs.pop(self.id, None)


class FakeQuery:
    def __init__(self, db, collection_name, filters=(), orders=(), limit_count=None, start_after_id=None):
        self._db = db
        self._collection_name = collection_name
        self._filters = tuple(filters)
        self._orders = tuple(orders)
        self._limit = limit_count
        self._start_after_id = start_after_id

    def _copy(self, **changes):
        params = dict(
            filters=self._filters, orders=self._orders,
            limit_count=self._limit, start_after_id=self._start_after_id
        )
        params.update(changes)
        return FakeQuery(self._db, self._collection_name, **params)

    def where(self, field, op, value):
        if op not in ('==', 'in', 'array_contains'):
            raise NotImplementedError(f"Unsupported operator: {op}")
        return self._copy(filters=self._filters + ((field, op, value),))

    def order_by(self, field, direction=firestore.Query.ASCENDING):
        return self._copy(orders=self._orders + ((field, direction),))

    def limit(self, count):
        return self._copy(limit_count=count)

    def start_after(self, snapshot):
        return self._copy(start_after_id=snapshot.id)

    @staticmethod
    def _matches(data, field, op, value):
        current = data.get(field, _MISSING)
        if current is _MISSING:
            return False
        if op == '==':
            return current == value
        if op == 'in':
            return current in value
        return isinstance(current, list) and value in current

    def stream(self, transaction=None):
        if transaction is not None:
            transaction._check_read()
        docs = self._db.store.get(self._collection_name, {})
        items = [
            (doc_id, data) for doc_id, data in docs.items()
            if all(self._matches(data, f, op, v) for f, op, v in self._filters)
        ]
        # 마지막 정렬 조건부터 적용해야 첫 번째 조건이 우선합니다 (안정 정렬).
        for field, direction in reversed(self._orders):
            items.sort(key=lambda item: item[1].get(field), reverse=direction == firestore.Query.DESCENDING)
        if self._start_after_id is not None:
            ids = [doc_id for doc_id, _ in items]
            if self._start_after_id in ids:
                items = items[ids.index(self._start_after_id) + 1:]
        if self._limit is not None:
            items = items[:self._limit]

        collection = self._db.collection(self._collection_name)
        return iter([FakeSnapshot(collection.document(doc_id), copy.deepcopy(data)) for doc_id, data in items])

    def get(self, transaction=None):
        return list(self.stream(transaction=transaction))


class FakeCollection(FakeQuery):
    def __init__(self, db, name):
        super().__init__(db, name)
        self.id = name

    def document(self, doc_id=None):
        return FakeDocumentReference(self._db, self._collection_name, doc_id or f"auto-{next(self._db.id_counter)}")


class FakeTransaction:
    """쓰기를 버퍼에 모았다가 commit 시점에 한 번에 반영하는 트랜잭션."""
    def __init__(self, db):
        self._db = db
        self._writes = []
        self.fail_on_write = None  # n번째 쓰기에서 커밋을 실패시키는 장애 주입용

    def _check_read(self):
        # Firestore 트랜잭션은 모든 읽기가 쓰기보다 먼저 와야 합니다.
        if self._writes:
            raise ValueError("Firestore transactions require all reads to be executed before all writes.")

    def set(self, reference, data):
        self._writes.append(('set', reference, data))

    def update(self, reference, data):
        self._writes.append(('update', reference, data))

    def delete(self, reference):
        self._writes.append(('delete', reference, None))

    def _commit(self):
        backup = copy.deepcopy(self._db.store)
        try:
            for index, (op, reference, data) in enumerate(self._writes, start=1):
                if self.fail_on_write == index:
                    raise RuntimeError(f"injected commit failure at write {index}")
                if op == 'set':
                    reference.set(data)
                elif op == 'update':
                    reference.update(data)
                else:
                    reference.delete()
        except Exception:
            self._db.store = backup
            raise
        finally:
            self._writes = []
        self._db.commit_count += 1

    def _rollback(self):
        self._writes = []


def fake_transactional(func):
    """firestore.transactional 대체. 성공하면 커밋, 예외가 나면 롤백 후 예외를 다시 던집니다."""
    def wrapper(transaction, *args, **kwargs):
        try:
            result = func(transaction, *args, **kwargs)
        except Exception:
            transaction._rollback()
            raise
        transaction._commit()
        return result
    return wrapper


class FakeFirestore:
    def __init__(self):
        self.store = {}
        self.id_counter = itertools.count(1)
        self.write_count = 0
        self.commit_count = 0
        self.transactions = []

    def collection(self, name):
        return FakeCollection(self, name)

    def transaction(self):
        transaction = FakeTransaction(self)
        self.transactions.append(transaction)
        return transaction

    def snapshot(self):
        """현재 저장된 모든 문서의 복사본 (변경 여부 비교용)."""
        return copy.deepcopy(self.store)

    def docs(self, collection_name):
        return copy.deepcopy(self.store.get(collection_name, {}))


# --- 픽스처 ---

@pytest.fixture
def db(monkeypatch):
    monkeypatch.setattr(firestore, 'transactional', fake_transactional)
    return FakeFirestore()


@pytest.fixture
def seed_users(db):
    """알림 발신자 조회에 필요한 기본 사용자 문서를 만듭니다."""
    users = {
        'owner-a': {'user_id': 'owner-a', 'display_name': '에이', 'photo_url': None, 'city': '서울'},
        'user-b': {'user_id': 'user-b', 'display_name': '비', 'photo_url': None, 'city': '부산'},
        'user-c': {'user_id': 'user-c', 'display_name': '씨', 'photo_url': None, 'city': '대구'},
    }
    for user_id, data in users.items():
        db.collection('users').document(user_id).set(data)
    return users


@pytest.fixture
def notification_service(db):
    return NotificationService(db)


@pytest.fixture
def user_service(db):
    return UserService(db)


@pytest.fixture
def pet_service(db):
    return PetService(db)


@pytest.fixture
def post_service(db, notification_service):
    return PostService(db, notification_service=notification_service)


@pytest.fixture
def adoption_service(db, pet_service, notification_service):
    return AdoptionService(db, pet_service=pet_service, notification_service=notification_service)


@pytest.fixture
def listed_pet(pet_service, seed_users):
    """owner-a가 소유하고 입양 게시판에 올린 반려동물."""
    return pet_service.add_pet('owner-a', {'name': '초코', 'species': 'Dog', 'age': 3, 'waiting_for_adoption': True})


@pytest.fixture
def app(db):
    app = create_app('testing', db=db)
    yield app


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def auth_headers(app):
    """auth_headers('user-b') 형태로 해당 사용자의 Bearer 토큰 헤더를 만듭니다."""
    from flask_jwt_extended import create_access_token

    def _make(user_id):
        with app.app_context():
            token = create_access_token(identity=user_id)
        return {"Authorization": f"Bearer {token}"}
    return _make
