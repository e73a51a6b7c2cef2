"""
API Package — FastAPI Routers • Models • JWT Auth • AI Responders
=================================================================

Mission
-------
This package defines the backend's HTTP interface and its support stack:
FastAPI routing, JWT auth, the chat-turn orchestration and the calls to the
language models that answer questions about municipal legislation.

Contents
--------
- fast_api
    Router for authentication (login, logout, current user) and chat
    (query, history list, conversation detail).

- admin_api
    Admin-only router: user CRUD, roles, usage reports, environment settings
    and server restart.

- models
    Pydantic data contracts for request/response validation.

- utils
    JWT helpers and the auth gate dependencies:
      • create_access_token(payload) — issues signed JWTs with iat/exp
      • verify_token(token) — validates JWTs and returns the claims
      • get_current_user / require_admin — FastAPI dependencies

- chat_orchestrator
    One chat turn: conversation creation with an AI title, user message,
    responder call, assistant message. Also the history read paths.

- ai_responses
    General legislative responder, internal laws endpoint with fallback,
    conversation title generation.

- env_settings
    Masked read / versioned write of the environment file, process restart.

Operational Notes
-----------------
- Security: `Authorization: Bearer <token>`; never log secrets.
- Language: prompts and user-facing messages are in Brazilian Portuguese.
"""
