from flask import Blueprint, request, render_template, redirect, url_for, session, jsonify, current_app
from flask_login import login_user, logout_user, current_user

from services.auth_service import authenticate_user, get_auth_gateway, user_for_token
from services.errors import AuthProviderError
from utils.decorators import ensure_authenticated

auth_bp = Blueprint("auth", __name__)


# =========================================================
# ROOT: TOKEN HAND-OFF FROM THE IDENTITY PROVIDER
# =========================================================
@auth_bp.route("/")
def index():
    token_hash = request.args.get("token_hash")
    confirm_type = request.args.get("type")
    access_token = request.args.get("access_token")

    # Email confirmation links land here first
    if token_hash and confirm_type == "signup":
        return redirect(url_for("auth.confirm", token_hash=token_hash, type=confirm_type))

    if access_token:
        user = user_for_token(access_token)
        if user:
            session["access_token"] = access_token
            refresh_token = request.args.get("refresh_token")
            if refresh_token:
                session["refresh_token"] = refresh_token
            login_user(user)
            return redirect(url_for("pages.dashboard"))

    if ensure_authenticated():
        return redirect(url_for("pages.dashboard"))

    return redirect(url_for("auth.login"))


@auth_bp.route("/auth/confirm")
def confirm():
    token_hash = request.args.get("token_hash")
    confirm_type = request.args.get("type")

    if not token_hash or not confirm_type:
        return render_template("error.html", message="Invalid confirmation link"), 400

    try:
        get_auth_gateway().verify_email(token_hash, "signup")
    except AuthProviderError as exc:
        current_app.logger.warning("Email confirmation failed: %s", exc.message)
        return render_template("error.html", message="Failed to confirm email. Please try again."), 400

    return render_template(
        "auth_confirm.html",
        message="Email confirmed successfully! You can now login to your account.",
        success=True
    )


# =========================================================
# LOGIN / LOGOUT (local password accounts)
# =========================================================
@auth_bp.route("/login", methods=["GET", "POST"])
def login():
    if request.method == "POST":
        email = request.form.get("email")
        password = request.form.get("password")

        if not email or not password:
            return render_template("login.html", error="Email and password are required"), 400

        user = authenticate_user(email, password)
        if not user:
            current_app.logger.info("Failed login for %s", email)
            return render_template("login.html", error="Invalid email or password"), 401

        login_user(user)

        if user.is_admin:
            return redirect(url_for("pages.admin_dashboard"))
        return redirect(url_for("pages.dashboard"))

    return render_template("login.html")


@auth_bp.route("/logout")
def logout():
    logout_user()
    session.clear()
    return redirect(url_for("auth.login"))


@auth_bp.route("/api/auth/check")
def auth_check():
    if not ensure_authenticated():
        return jsonify({"authenticated": False})

    return jsonify({
        "authenticated": True,
        "user": current_user.to_dict()
    })
