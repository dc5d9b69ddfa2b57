from __future__ import annotations

from flask import Flask, g, request, session

from ..common.responses import fail, json_body, ok
from ..container import Container
from ..core.exceptions import AuthenticationError, ValidationError
from ..routing import guard


def register(app: Flask, container: Container) -> None:
    @app.route("/login", methods=["GET"], endpoint="login")
    def login_page():
        decision = guard(g.auth)
        if decision.allowed:
            # Already signed in: send the principal to its own dashboard.
            return ok(redirect=g.auth.user.role.home_route, user=g.auth.user.to_dict())
        return ok(message="Please sign in", roles=["admin", "employee"])

    @app.route("/api/auth/login", methods=["POST"], endpoint="api_login")
    def api_login():
        data = json_body()
        try:
            user = g.auth.login(data.get("email", ""), data.get("password", ""), data.get("role", ""))
        except (AuthenticationError, ValidationError) as e:
            session.pop("access_token", None)
            return fail(str(e), 401)

        session.permanent = True
        session["access_token"] = g.auth.access_token
        return ok(user=user.to_dict(), redirect=user.role.home_route)

    @app.route("/api/auth/register", methods=["POST"], endpoint="api_register")
    def api_register():
        data = json_body()
        employee = g.auth.register(
            name=data.get("name", ""),
            email=data.get("email", ""),
            password=data.get("password", ""),
            department=data.get("department", ""),
            position=data.get("position", ""),
        )
        message = "Account created"
        if container.require_email_confirmation:
            message = "Account created, please confirm your email before signing in"
        return ok(201, employee=employee.to_dict(), message=message)

    @app.route("/api/auth/confirm", methods=["GET", "POST"], endpoint="api_confirm")
    def api_confirm():
        # GET serves the emailed link, POST a confirmation form.
        data = {**request.args.to_dict(), **json_body()}
        g.auth.confirm_email(data.get("email", ""), data.get("token", ""))
        return ok(message="Email confirmed")

    @app.route("/api/auth/logout", methods=["POST"], endpoint="api_logout")
    def api_logout():
        try:
            g.auth.logout()
        finally:
            session.pop("access_token", None)
        return ok(message="Signed out", redirect="/login")

    @app.route("/api/auth/me", methods=["GET"], endpoint="api_me")
    def api_me():
        auth = g.auth
        return ok(
            loading=auth.loading,
            is_authenticated=auth.is_authenticated,
            state=auth.state.value,
            user=auth.user.to_dict() if auth.user else None,
        )
