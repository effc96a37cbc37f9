import os
import tempfile

# must be set before config.config is imported
_TMP_DIR = tempfile.mkdtemp(prefix="chefhub-tests-")
os.environ["DATABASE_URL"] = "sqlite:///" + os.path.join(_TMP_DIR, "test.db")
os.environ["JWT_SECRET"] = "test-secret"
os.environ["MAIL_SUPPRESS_SEND"] = "true"

import pytest

from app import create_app
from db.database import SessionLocal, drop_db, session_scope
from models.user import User, UserRole
from utils.auth import create_access_token, hash_password


@pytest.fixture
def app(tmp_path):
    SessionLocal.remove()
    drop_db()
    app = create_app({
        "TESTING": True,
        "MAIL_SUPPRESS_SEND": True,
        "MAIL_DEFAULT_SENDER": "noreply@example.com",
        "ADMIN_EMAIL": None,
        "BCRYPT_LOG_ROUNDS": 4,
        "UPLOAD_FOLDER": str(tmp_path / "uploads"),
    })
    yield app
    SessionLocal.remove()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def make_user(app):
    def _make(username="alice", role=UserRole.USER.value, user_id=None, email=None,
              password="secret123", is_banned=False):
        with app.app_context():
            with session_scope() as session:
                user = User(
                    username=username,
                    email=email or f"{username}@example.com",
                    password_hash=hash_password(password),
                    full_name=username.title(),
                    role=role,
                    is_banned=is_banned,
                )
                if user_id is not None:
                    user.id = user_id
                session.add(user)
                session.flush()
                return user.id
    return _make


@pytest.fixture
def auth_headers(app):
    def _headers(user_id):
        with app.app_context():
            with session_scope() as session:
                token = create_access_token(session.get(User, user_id))
        return {"Authorization": f"Bearer {token}"}
    return _headers


@pytest.fixture
def admin_headers(make_user, auth_headers):
    admin_id = make_user("admin", role=UserRole.ADMIN.value)
    return auth_headers(admin_id)


@pytest.fixture
def db_count(app):
    def _count(model, **filters):
        with session_scope() as session:
            return session.query(model).filter_by(**filters).count()
    return _count


def application_payload(**overrides):
    payload = {
        "specialtyCuisine": "Italian",
        "yearsOfExperience": 5,
        "certificationName": "Le Cordon Bleu Diploma",
        "certificationImageUrl": "http://localhost/certifications/cert.png",
        "portfolioLink": "https://example.com/portfolio",
        "biography": "Pasta maker from Bologna.",
    }
    payload.update(overrides)
    return payload


@pytest.fixture
def payload():
    return application_payload
