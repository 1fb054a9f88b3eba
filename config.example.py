# config.example.py

"""
Documentation-only module (safe to commit).

The real configuration is loaded from environment variables (optionally via a local .env file).
Do NOT commit real tokens. The stored session lives under the data dir, which is gitignored.

This file exists to make the repo self-documenting even without opening .env.example.
"""

ENV_VARS = {
    # App / logging
    "TODO_APP_NAME": "App display name (default: todo).",
    "TODO_LOG_LEVEL": "Console logging level (default: INFO).",
    # Remote API
    "TODO_API_BASE_URL": "Todo backend base URL (default: http://localhost:8000).",
    "TODO_HTTP_TIMEOUT_SECONDS": "Per-request timeout; 0 waits forever (default: 0).",
    # Paths (gitignored)
    "TODO_DATA_DIR": "Local data directory for logs and the session (default: .local/todo).",
    "TODO_TOKEN_STORE_PATH": "Stored session file (default: <data_dir>/auth.json).",
    # Tasks
    "TODO_TASKS_PAGE_SIZE": "Default page size for /list and the post-login refresh (default: 100).",
    # Google sign-in
    "TODO_GOOGLE_CLIENT_ID": "OAuth client id used to obtain Google ID tokens.",
    "TODO_GOOGLE_SCOPES": "Comma/space separated scopes (default: profile email).",
    # Front end
    "TODO_CONSOLE_ENABLED": "Run the interactive console (true/false, default: true).",
}
