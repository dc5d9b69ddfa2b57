from __future__ import annotations

from datetime import datetime

import pytest

from ems_dashboard.auth.store import AuthStore
from ems_dashboard.core.enums import AuthState, Role
from ems_dashboard.core.exceptions import AuthenticationError, GatewayError, ValidationError

from fakes import FIXED_TODAY, FakeAuthGateway, InMemoryProfiles


def test_login_with_matching_role_authenticates(auth_store):
    user = auth_store.login("admin@company.com", "admin123", Role.ADMIN)

    assert user.role is Role.ADMIN
    assert auth_store.is_authenticated
    assert auth_store.state is AuthState.AUTHENTICATED
    assert auth_store.access_token is not None


def test_login_with_wrong_password_fails(auth_store):
    with pytest.raises(AuthenticationError):
        auth_store.login("admin@company.com", "nope", "admin")

    assert not auth_store.is_authenticated
    assert auth_store.state is AuthState.UNAUTHENTICATED


def test_role_mismatch_fails_and_signs_out_remote_session(auth_store, auth_gateway):
    with pytest.raises(AuthenticationError):
        auth_store.login("john@company.com", "employee123", "admin")

    assert not auth_store.is_authenticated
    assert auth_store.user is None
    assert auth_store.state is AuthState.UNAUTHENTICATED
    assert auth_gateway.sessions == {}
    assert len(auth_gateway.signed_out) == 1


def test_login_without_profile_is_rejected(auth_gateway, employees_repo):
    auth_gateway.add_user(user_id="u-ghost", email="ghost@company.com", password="secret1")
    auth = AuthStore(auth_gateway, InMemoryProfiles([]), employees_repo)

    with pytest.raises(AuthenticationError):
        auth.login("ghost@company.com", "secret1", "employee")

    assert auth_gateway.sessions == {}


def test_unknown_role_is_a_validation_error(auth_store):
    with pytest.raises(ValidationError):
        auth_store.login("admin@company.com", "admin123", "superuser")


def test_logout_clears_principal_and_remote_session(auth_store, auth_gateway):
    auth_store.login("john@company.com", "employee123", Role.EMPLOYEE)
    token = auth_store.access_token

    auth_store.logout()

    assert not auth_store.is_authenticated
    assert auth_store.state is AuthState.UNAUTHENTICATED
    assert token not in auth_gateway.sessions


def test_restore_recovers_existing_session(auth_store, auth_gateway, profiles, employees_repo):
    auth_store.login("john@company.com", "employee123", Role.EMPLOYEE)
    token = auth_store.access_token

    fresh = AuthStore(auth_gateway, profiles, employees_repo)
    user = fresh.restore(token)

    assert user.email == "john@company.com"
    assert fresh.is_authenticated
    assert fresh.loading is False
    fresh.close()


def test_restore_with_unknown_or_missing_token_stays_unauthenticated(auth_store):
    assert auth_store.restore(None) is None
    assert auth_store.restore("token-unknown") is None
    assert not auth_store.is_authenticated
    assert auth_store.loading is False


def test_restore_ignores_expired_session(profiles, employees_repo):
    clock = {"now": datetime(2024, 1, 1, 8, 0)}
    gateway = FakeAuthGateway(now=lambda: clock["now"], session_days=7)
    gateway.add_user(user_id="u-john", email="john@company.com", password="employee123")
    token = gateway.sign_in("john@company.com", "employee123").access_token

    clock["now"] = datetime(2024, 1, 9, 8, 0)
    auth = AuthStore(gateway, profiles, employees_repo)

    assert auth.restore(token) is None
    assert not auth.is_authenticated


def test_restore_backend_failure_degrades_to_unauthenticated(auth_store, auth_gateway):
    auth_gateway.fail_with = GatewayError("auth service down")

    assert auth_store.restore("token-1") is None
    assert auth_store.error == "auth service down"
    assert auth_store.loading is False


def test_backend_sign_out_event_clears_matching_store(auth_store, auth_gateway):
    auth_store.login("john@company.com", "employee123", Role.EMPLOYEE)

    auth_gateway.sign_out(auth_store.access_token)

    assert not auth_store.is_authenticated


def test_register_creates_employee_with_employee_role(auth_store, auth_gateway, profiles, store):
    employee = auth_store.register(
        name="Jane Doe",
        email="Jane@Company.com",
        password="secret123",
        department="Finance",
        position="Analyst",
    )

    assert employee.email == "jane@company.com"
    assert employee.join_date == FIXED_TODAY.isoformat()
    assert profiles.by_user_id[employee.user_id].role is Role.EMPLOYEE
    # Registration hands the new employee to the domain store directly.
    assert store.get_employee(employee.id) == employee
    # Registering does not sign the caller in.
    assert not auth_store.is_authenticated
    assert auth_store.login("jane@company.com", "secret123", Role.EMPLOYEE).name == "Jane Doe"


def test_register_existing_email_fails_without_duplicates(auth_store, employees_repo, auth_gateway):
    before = len(employees_repo.rows)

    with pytest.raises(ValidationError):
        auth_store.register(
            name="John Again",
            email="john@company.com",
            password="secret123",
            department="Engineering",
            position="Developer",
        )

    assert len(employees_repo.rows) == before
    assert len([u for u in auth_gateway.users.values() if u.email == "john@company.com"]) == 1


def test_register_validates_input(auth_store):
    with pytest.raises(ValidationError):
        auth_store.register(name="", email="x@company.com", password="secret123", department="D", position="P")
    with pytest.raises(ValidationError):
        auth_store.register(name="X", email="not-an-email", password="secret123", department="D", position="P")
    with pytest.raises(ValidationError):
        auth_store.register(name="X", email="x@company.com", password="123", department="D", position="P")


def test_register_rolls_back_auth_user_when_employee_insert_fails(auth_store, auth_gateway, employees_repo):
    original_insert = employees_repo.insert

    def failing_insert(data):
        raise GatewayError("insert failed")

    employees_repo.insert = failing_insert
    try:
        with pytest.raises(GatewayError):
            auth_store.register(
                name="Jane Doe",
                email="jane@company.com",
                password="secret123",
                department="Finance",
                position="Analyst",
            )
    finally:
        employees_repo.insert = original_insert

    assert "jane@company.com" not in auth_gateway.users


@pytest.fixture
def confirming_auth(auth_gateway, profiles, employees_repo):
    sent: list[tuple[str, str]] = []
    auth = AuthStore(
        auth_gateway,
        profiles,
        employees_repo,
        require_email_confirmation=True,
        send_confirmation=lambda email, token: sent.append((email, token)),
    )
    auth.register(name="Jane Doe", email="jane@company.com", password="secret123", department="Finance", position="Analyst")
    yield auth, sent
    auth.close()


def test_email_confirmation_required_before_login(confirming_auth):
    auth, sent = confirming_auth

    with pytest.raises(AuthenticationError):
        auth.login("jane@company.com", "secret123", Role.EMPLOYEE)

    [(email, token)] = sent
    auth.confirm_email(email, token)
    assert auth.login("jane@company.com", "secret123", Role.EMPLOYEE).email == "jane@company.com"


@pytest.mark.parametrize("token", ["", "confirm-guess"])
def test_confirmation_without_issued_token_keeps_login_blocked(confirming_auth, token):
    auth, _ = confirming_auth

    with pytest.raises(ValidationError):
        auth.confirm_email("jane@company.com", token)

    with pytest.raises(AuthenticationError):
        auth.login("jane@company.com", "secret123", Role.EMPLOYEE)


def test_confirmation_token_is_single_use(confirming_auth):
    auth, sent = confirming_auth
    [(email, token)] = sent

    auth.confirm_email(email, token)

    with pytest.raises(ValidationError):
        auth.confirm_email(email, token)


def test_no_confirmation_sent_when_not_required(auth_gateway, profiles, employees_repo):
    sent = []
    auth = AuthStore(auth_gateway, profiles, employees_repo, send_confirmation=lambda *args: sent.append(args))

    auth.register(name="Jane Doe", email="jane@company.com", password="secret123", department="Finance", position="Analyst")

    assert sent == []
    auth.close()


def test_second_login_signs_out_previous_session(auth_store, auth_gateway):
    auth_store.login("john@company.com", "employee123", Role.EMPLOYEE)
    first = auth_store.access_token

    auth_store.login("admin@company.com", "admin123", Role.ADMIN)

    assert first not in auth_gateway.sessions
    assert first in auth_gateway.signed_out
    assert list(auth_gateway.sessions) == [auth_store.access_token]
    assert auth_store.user.role is Role.ADMIN


def test_sign_in_discards_expired_sessions(profiles, employees_repo):
    clock = {"now": datetime(2024, 1, 1, 8, 0)}
    gateway = FakeAuthGateway(now=lambda: clock["now"], session_days=7)
    gateway.add_user(user_id="u-john", email="john@company.com", password="employee123")
    stale = gateway.sign_in("john@company.com", "employee123").access_token

    clock["now"] = datetime(2024, 1, 10, 8, 0)
    fresh = gateway.sign_in("john@company.com", "employee123").access_token

    assert list(gateway.sessions) == [fresh]
    assert stale not in gateway.sessions


class RecordingGateway(FakeAuthGateway):
    """Records the store's ``loading`` flag while a session lookup is running."""

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        self.auth = None
        self.loading_seen: list[bool] = []

    def get_session(self, access_token):
        self.loading_seen.append(self.auth.loading)
        return super().get_session(access_token)


def test_restore_is_loading_only_while_lookup_runs(profiles, employees_repo):
    gateway = RecordingGateway()
    gateway.add_user(user_id="u-john", email="john@company.com", password="employee123")
    token = gateway.sign_in("john@company.com", "employee123").access_token
    auth = AuthStore(gateway, profiles, employees_repo)
    gateway.auth = auth

    assert auth.restore(token) is not None

    assert gateway.loading_seen == [True]
    assert auth.loading is False
    auth.close()


def test_restore_failure_still_ends_loading(profiles, employees_repo):
    gateway = RecordingGateway()
    auth = AuthStore(gateway, profiles, employees_repo)
    gateway.auth = auth
    gateway.fail_with = GatewayError("auth service down")

    assert auth.restore("token-1") is None

    assert gateway.loading_seen == [True]
    assert auth.loading is False
    auth.close()
