from __future__ import annotations

from ems_dashboard.auth.store import AuthStore
from ems_dashboard.core.enums import Role
from ems_dashboard.routing import LOGIN_ROUTE, guard

from fakes import FakeAuthGateway


def test_guard_waits_while_session_is_restoring(profiles, employees_repo):
    decisions = []

    class GuardedGateway(FakeAuthGateway):
        def get_session(self, access_token):
            decisions.append(guard(auth, Role.ADMIN))
            return super().get_session(access_token)

    gateway = GuardedGateway()
    auth = AuthStore(gateway, profiles, employees_repo)

    auth.restore("token-unknown")

    [decision] = decisions
    assert decision.waiting
    assert decision.redirect_to is None
    # Once the lookup has finished the guard falls through to the login redirect.
    assert guard(auth, Role.ADMIN).redirect_to == LOGIN_ROUTE
    auth.close()


def test_guard_redirects_unauthenticated_to_login(auth_store):
    decision = guard(auth_store, Role.EMPLOYEE)

    assert not decision.allowed
    assert decision.redirect_to == LOGIN_ROUTE


def test_guard_sends_role_mismatch_to_own_dashboard(auth_store):
    auth_store.login("john@company.com", "employee123", Role.EMPLOYEE)

    decision = guard(auth_store, Role.ADMIN)

    assert not decision.allowed
    assert decision.redirect_to == "/employee"


def test_guard_allows_matching_role(auth_store):
    auth_store.login("admin@company.com", "admin123", Role.ADMIN)

    assert guard(auth_store, Role.ADMIN).allowed
    assert guard(auth_store).allowed
