"""Users app package.

Guest accounts on top of Django's built-in user model: signup, login and
JWT token issuing.
"""
