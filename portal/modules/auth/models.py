# Supabase Auth
# Accounts live in Supabase's auth.users table; no custom tables are required.
# The portal's own `users` table (see modules/users/models.py) may reference
# an auth account through its auth_id column.

"""
Supabase Auth calls used by this module:
- auth.sign_up() - register, full_name stored in user_metadata
- auth.sign_in_with_password() - password login, returns a session
- auth.get_user() - resolve a JWT to its user
- auth.refresh_session() - exchange a refresh token for a new session
- auth.sign_out() - end the session
- auth.reset_password_for_email() - send the password reset email
- auth.on_auth_state_change() - sign-in / sign-out event subscription
"""
