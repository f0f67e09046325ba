from flask import request, jsonify
from flask_login import login_user, logout_user, login_required, current_user
from ...models.user import User
from ...services.visibility import principal_for
from . import bp
from functools import wraps
from flask import abort, current_app

def role_required(*roles):
    def deco(f):
        @wraps(f)
        def wrapper(*args, **kwargs):
            if not current_user.is_authenticated or current_user.role not in roles:
                abort(403)
            return f(*args, **kwargs)
        return wrapper
    return deco

def current_principal():
    return principal_for(current_user)

@bp.post("/login")
def login():
    username = request.form.get("username","").strip()
    password = request.form.get("password","")
    u = User.query.filter_by(username=username).one_or_none()
    if u and u.check_password(password):
        login_user(u)
        current_app.logger.info("User %s logged in as %s", u.username, u.role)
        return jsonify({"username": u.username, "role": u.role})
    current_app.logger.info("Failed login for %s", username)
    return jsonify({"error": "Incorrect username or password"}), 401

@bp.get("/logout")
@login_required
def logout():
    logout_user()
    return jsonify({"status": "ok"})

@bp.get("/me")
@login_required
def me():
    p = current_principal()
    return jsonify({"username": current_user.username, "role": p.role,
                    "teacher_id": p.teacher_id, "student_id": p.student_id})
