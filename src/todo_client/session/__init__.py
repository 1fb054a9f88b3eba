"""
Session subsystem.

Components:
- manager.py: SessionManager (token + profile, login/logout, token listeners)
- models.py: User / Location and the profile wire mapping
- token_storage.py: JSON-file token storage
- identity.py: console Google sign-in
- validation.py: email/password checks used before login/register
"""
