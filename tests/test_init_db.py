from app.core.rbac import has_role, role_set, user_role
from app.core.security import verify_password
from app.db.init_db import init_db, seed_admin
from app.models import User, UserRole
from app.utils.jwt import create_access_token, decode_token


def test_init_db_is_repeatable(engine):
    init_db(engine)
    init_db(engine)


def test_seed_admin_once(db):
    first = seed_admin(db, email="Root@Clinic.test", password="s3cret")
    second = seed_admin(db, email="root@clinic.test", password="other")

    assert first.id == second.id
    assert first.email == "root@clinic.test"
    assert first.role == UserRole.ADMIN.value
    assert verify_password("s3cret", first.password_hash)
    assert not verify_password("other", first.password_hash)
    assert db.query(User).count() == 1


def test_verify_password_tolerates_garbage_hash():
    assert verify_password("x", "not-a-hash") is False


def test_token_round_trip():
    token = create_access_token(user_id=5, role="CASHIER")
    payload = decode_token(token)
    assert payload["sub"] == "5"
    assert payload["role"] == "CASHIER"
    assert decode_token(token + "x") is None


def test_role_helpers():
    u = User(email="a@b.c", password_hash="x", role="cashier")
    assert user_role(u) == "CASHIER"
    assert role_set([UserRole.ADMIN, "cashier", ""]) == {"ADMIN", "CASHIER"}
    assert has_role(u, [UserRole.CASHIER])
    assert not has_role(u, [UserRole.ADMIN])
    assert not has_role(None, [UserRole.ADMIN])
