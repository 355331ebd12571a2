from flask import jsonify
from flask_login import current_user, login_required, login_user, logout_user
from flask_wtf.csrf import generate_csrf

from ..api_utils import form_error_response
from ..extensions import db
from ..models import User
from . import bp
from .forms import LoginForm, RegistrationForm


@bp.route("/csrf-token", methods=["GET"])
def csrf_token():
    return jsonify({"csrfToken": generate_csrf()})


@bp.route("/register", methods=["POST"])
def register():
    if current_user.is_authenticated:
        return jsonify({"error": "You are already signed in."}), 400

    form = RegistrationForm()
    if not form.validate_on_submit():
        return form_error_response(form)

    user = User(email=form.email.data.lower(), display_name=form.display_name.data.strip())
    user.set_password(form.password.data)
    db.session.add(user)
    db.session.commit()
    login_user(user)
    return jsonify({"user": user.to_dict()}), 201


@bp.route("/login", methods=["POST"])
def login():
    if current_user.is_authenticated:
        return jsonify({"user": current_user.to_dict()})

    form = LoginForm()
    if not form.validate_on_submit():
        return form_error_response(form)

    user = User.query.filter_by(email=form.email.data.lower()).first()
    if not user or not user.check_password(form.password.data):
        return jsonify({"error": "Invalid email or password."}), 401

    login_user(user)
    return jsonify({"user": user.to_dict()})


@bp.route("/logout", methods=["POST"])
@login_required
def logout():
    logout_user()
    return jsonify({"message": "You have been signed out."})


@bp.route("/me", methods=["GET"])
@login_required
def me():
    return jsonify({"user": current_user.to_dict()})
