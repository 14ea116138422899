"""
The `core` package holds the service functions the API routers call.

- db
    `Database`: engine and session factory built from the settings.
- funcs
    User, profile, chat and guide-progress operations built on the DAOs.
"""
