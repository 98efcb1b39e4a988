from flask import Blueprint, current_app, flash, jsonify, redirect, render_template, request, session, url_for

"""
login gate for the whole app. Sign in itself belongs to the company identity
provider, all this blueprint does is remember who signed in and make sure
their email is on the allowed domain.
"""
auth_bp = Blueprint('auth', __name__)

OPEN_ENDPOINTS = {'auth.login', 'auth.logout', 'static'}


def is_allowed_email(email, domain):
    if not email or '@' not in email:
        return False
    return email.strip().lower().endswith('@' + domain.lower())


def current_user_email():
    return session.get('user_email')


@auth_bp.before_app_request
def require_login():
    """Every route apart from login and logout needs an allowed user."""

    if request.endpoint in OPEN_ENDPOINTS:
        return None

    if is_allowed_email(session.get('user_email'), current_app.config['ALLOWED_EMAIL_DOMAIN']):
        return None

    if request.path.startswith('/api/'):
        return jsonify({'error': 'Authentication required', 'code': 'UNAUTHORIZED'}), 401

    flash('Please login to access the blueprint', 'error')
    return redirect(url_for('auth.login'))


@auth_bp.route('/login', methods=['GET', 'POST'])
def login():
    """Login page."""

    domain = current_app.config['ALLOWED_EMAIL_DOMAIN']

    if request.method == 'GET':
        return render_template('login.html', domain=domain)

    email = request.form.get('email', '').strip().lower()

    if not is_allowed_email(email, domain):
        current_app.logger.info('login refused for %s', email or '<blank>')
        flash(f'Only @{domain} accounts can use this app', 'error')
        return redirect(url_for('auth.login'))

    session['user_email'] = email
    flash('Login successful!', 'success')
    return redirect(url_for('home'))


@auth_bp.route('/logout')
def logout():
    """Logout."""
    session.pop('user_email', None)
    flash('Logged out successfully', 'success')
    return redirect(url_for('auth.login'))
