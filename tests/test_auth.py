import string
from datetime import datetime, timezone

import pytest

from tampayang.auth import (
    LoginError,
    LoginGuard,
    LoginUser,
    build_claims,
    generate_jti,
)


class FakeClock:
    def __init__(self):
        self.now = 1000.0

    def __call__(self):
        return self.now


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def guard(clock):
    return LoginGuard(5, 900, 60, 10, clock)


def test_rate_limit_allows_ten_then_blocks(guard):
    results = [guard.is_rate_limited("10.0.0.1") for _ in range(11)]
    assert results[:10] == [False] * 10
    assert results[10] is True


def test_rate_limit_is_per_ip(guard):
    for _ in range(11):
        guard.is_rate_limited("10.0.0.1")
    assert guard.is_rate_limited("10.0.0.2") is False


def test_rate_limit_window_expires(guard, clock):
    for _ in range(11):
        guard.is_rate_limited("10.0.0.1")
    clock.now += 61
    assert guard.is_rate_limited("10.0.0.1") is False


def test_lock_after_max_failures(guard):
    for _ in range(4):
        guard.record_failed_attempt("u1")
    assert guard.is_account_locked("u1") is False
    guard.record_failed_attempt("u1")
    assert guard.is_account_locked("u1") is True


def test_lock_expires(guard, clock):
    for _ in range(5):
        guard.record_failed_attempt("u1")
    clock.now += 901
    assert guard.is_account_locked("u1") is False
    guard.record_failed_attempt("u1")
    assert guard.is_account_locked("u1") is False


def test_reset_clears_lock(guard):
    for _ in range(5):
        guard.record_failed_attempt("u1")
    guard.reset("u1")
    assert guard.is_account_locked("u1") is False


def test_evaluate_unknown_user(guard):
    with pytest.raises(LoginError) as info:
        guard.evaluate_login("10.0.0.1", None, False)
    assert info.value.code == "auth006"


def test_evaluate_wrong_password_then_locked(guard):
    for _ in range(5):
        with pytest.raises(LoginError) as info:
            guard.evaluate_login("10.0.0.1", "u1", False)
        assert info.value.code == "auth006"
    with pytest.raises(LoginError) as info:
        guard.evaluate_login("10.0.0.1", "u1", True)
    assert info.value.code == "auth011"


def test_evaluate_rate_limited(guard):
    for _ in range(10):
        guard.evaluate_login("10.0.0.1", "u1", True)
    with pytest.raises(LoginError) as info:
        guard.evaluate_login("10.0.0.1", "u1", True)
    assert info.value.code == "auth010"


def test_successful_login_resets_failures(guard):
    for _ in range(4):
        with pytest.raises(LoginError):
            guard.evaluate_login("10.0.0.1", "u1", False)
    guard.evaluate_login("10.0.0.1", "u1", True)
    guard.record_failed_attempt("u1")
    assert guard.is_account_locked("u1") is False


def test_generate_jti_shape_and_uniqueness():
    first, second = generate_jti(), generate_jti()
    assert len(first) == 32
    assert set(first) <= set(string.hexdigits.lower())
    assert first != second and len(second) == 32


def test_build_claims():
    user = LoginUser("u1", "Admin", "admin@example.com", "admin")
    now = datetime(2024, 1, 1, tzinfo=timezone.utc)
    claims = build_claims(user, 60, now)
    assert claims["user_id"] == "u1"
    assert claims["user_email"] == "admin@example.com"
    assert claims["user_role"] == "admin"
    assert claims["iat"] == int(now.timestamp())
    assert claims["exp"] - claims["iat"] == 60 * 60
    assert len(claims["jti"]) == 32