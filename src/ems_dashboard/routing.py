from __future__ import annotations

from dataclasses import dataclass
from functools import wraps
from typing import Optional

from flask import g, jsonify, redirect

from .core.enums import Role

LOGIN_ROUTE = "/login"


@dataclass(frozen=True)
class RouteDecision:
    allowed: bool
    redirect_to: Optional[str] = None
    waiting: bool = False


def guard(auth, required_role: Optional[Role] = None) -> RouteDecision:
    """Decide whether the current principal may open a route.

    While session recovery is still running the answer is "wait", never a
    login redirect.
    """

    if auth.loading:
        return RouteDecision(allowed=False, waiting=True)
    if not auth.is_authenticated:
        return RouteDecision(allowed=False, redirect_to=LOGIN_ROUTE)
    if required_role is not None and auth.user.role is not required_role:
        return RouteDecision(allowed=False, redirect_to=auth.user.role.home_route)
    return RouteDecision(allowed=True)


def role_required(role: Optional[Role] = None):
    def decorator(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            decision = guard(g.auth, role)
            if decision.waiting:
                return jsonify({"success": False, "message": "Loading..."}), 503
            if not decision.allowed:
                return redirect(decision.redirect_to)
            return view(*args, **kwargs)

        return wrapper

    return decorator


login_required = role_required()
admin_required = role_required(Role.ADMIN)
employee_required = role_required(Role.EMPLOYEE)
