import re

from flask import Blueprint, jsonify
from flask_login import login_user, logout_user, login_required, current_user

from esg_portal import db
from esg_portal.errors import ValidationError
from esg_portal.models import User
from esg_portal.schemas import LoginRequest, RegisterRequest, parse_body

auth_bp = Blueprint("auth", __name__, url_prefix="/api/auth")

MIN_PASSWORD_LENGTH = 8


def _validate_password(password):
    """Check password meets minimum strength requirements."""
    if len(password) < MIN_PASSWORD_LENGTH:
        return f"Password must be at least {MIN_PASSWORD_LENGTH} characters."
    if not re.search(r'[A-Za-z]', password):
        return "Password must contain at least one letter."
    if not re.search(r'[0-9]', password):
        return "Password must contain at least one number."
    return None


@auth_bp.route("/register", methods=["POST"])
def register():
    body = parse_body(RegisterRequest)
    if User.query.filter_by(username=body.username).first():
        raise ValidationError(["Username already exists."])
    if User.query.filter_by(email=body.email).first():
        raise ValidationError(["Email already exists."])
    pw_error = _validate_password(body.password)
    if pw_error:
        raise ValidationError([pw_error])

    user = User(
        username=body.username,
        email=body.email,
        full_name=body.full_name,
        role="analyst",
    )
    user.set_password(body.password)
    db.session.add(user)
    db.session.commit()
    login_user(user)
    return jsonify({"success": True, "user": user.to_dict()}), 201


@auth_bp.route("/login", methods=["POST"])
def login():
    body = parse_body(LoginRequest)
    user = User.query.filter_by(username=body.username).first()
    if not user or not user.check_password(body.password):
        return jsonify({"success": False, "message": "Invalid username or password."}), 401
    login_user(user)
    return jsonify({"success": True, "user": user.to_dict()})


@auth_bp.route("/logout", methods=["POST"])
@login_required
def logout():
    logout_user()
    return jsonify({"success": True, "message": "You have been logged out."})


@auth_bp.route("/me")
@login_required
def me():
    return jsonify(current_user.to_dict())
