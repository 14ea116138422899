"""
The `api` package defines the backend’s HTTP interface,
along with supporting utilities and data models.

It integrates FastAPI routing, JWT authentication, and the AI proxy
for the chat and architect assistants. The package ensures clean
request/response validation and access control.

Contents
--------
- fast_api
    Defines the core FastAPI router with endpoints for:
        * User registration, login, logout and current-user lookup
        * Profile retrieval and update
        * Chat session creation, renaming, listing and deletion
        * Message creation, retrieval and clearing

- admin
    User management for admins: list, create, change role, block, delete

- ai
    Completion pass-through, model list, chat mode and architect mode

- catalog
    Scripts catalog search, categories and detail

- guides
    Setup guides with per-user step progress and reset

- models
    Pydantic schemas for request/response validation

- utils
    JWT utilities:
        * `create_access_token` — issues signed JWTs with expiration
        * `verify_token` — validates JWTs and extracts the user id

- deps
    FastAPI dependencies: settings, database session, current user, admin check

- ai_proxy
    `AIProxy`, the async client wrapper around the completion provider
"""
