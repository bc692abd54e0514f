"""Users app package.

This module initializes the users app. It defines the custom user model
used as ``AUTH_USER_MODEL`` (``users.User``) together with the sign up and
session endpoints. Token issuance is delegated to SimpleJWT; the rest of
the project only ever receives an already authenticated ``request.user``.
"""
