"""
Auth System

Registration, login and bearer-token protected access.

Submodules are imported directly (userauth.auth.router,
userauth.auth.dependencies); the user store depends on
userauth.auth.errors, so this package stays import-free.
"""
