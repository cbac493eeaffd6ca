"""Registration, login and profile routes."""

from __future__ import annotations

from flask import Blueprint, request

from lottery_app.auth import current_user, issue_token, login_required
from lottery_app.db import get_session
from lottery_app.schemas.auth import LoginSchema, ProfileUpdateSchema, RegisterSchema, UserSchema
from lottery_app.services.auth_service import AuthService
from lottery_app.utils.responses import created, ok

auth_bp = Blueprint("auth", __name__)

_register_schema = RegisterSchema()
_login_schema = LoginSchema()
_profile_schema = ProfileUpdateSchema()
_user_schema = UserSchema()
_service = AuthService()


@auth_bp.post("/auth/register")
def register():
    payload = request.get_json(silent=True) or {}
    data = _register_schema.load(payload)

    user = _service.register(get_session(), data)
    return created({"user": _user_schema.dump(user), "token": issue_token(user)})


@auth_bp.post("/auth/login")
def login():
    payload = request.get_json(silent=True) or {}
    data = _login_schema.load(payload)

    user = _service.login(get_session(), email=str(data["email"]), password=str(data["password"]))
    return ok({"user": _user_schema.dump(user), "token": issue_token(user)})


@auth_bp.get("/me")
@login_required
def get_profile():
    return ok(_user_schema.dump(current_user()))


@auth_bp.patch("/me")
@login_required
def update_profile():
    payload = request.get_json(silent=True) or {}
    data = _profile_schema.load(payload)

    user = _service.update_profile(get_session(), current_user(), data)
    return ok(_user_schema.dump(user))
