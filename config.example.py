# config.example.py

"""
Documentation-only module (safe to commit).

The real configuration is loaded from environment variables (optionally via a local .env file).
Do NOT commit real secrets. Keep GEMINI_API_KEY in .env (local, gitignored).

This file exists to make the repo self-documenting even without opening .env.
"""

ENV_VARS = {
    # Required
    "GEMINI_API_KEY": "Generation API key (alias: TASKMASTER_API_KEY). The server exits with status 1 if unset.",
    # App / logging
    "TASKMASTER_APP_NAME": "App display name (default: task-master-mcp).",
    "TASKMASTER_LOG_LEVEL": "Console logging level (default: INFO). Logs go to stderr, never stdout.",
    "TASKMASTER_DATA_DIR": "Directory for taskmaster.log (default: .local/taskmaster).",
    # Generation endpoint
    "TASKMASTER_API_BASE_URL": (
        "OpenAI-compatible base URL (alias: TASK_MANAGER_API_BASE_URL; "
        "default: https://generativelanguage.googleapis.com/v1beta/openai/)."
    ),
    "TASKMASTER_LLM_MODEL": "Model name (default: gemini-2.0-flash).",
    "TASKMASTER_LLM_TIMEOUT_SECONDS": "Read timeout per generation call (default: 30).",
    "TASKMASTER_LLM_CONNECT_TIMEOUT_SECONDS": "Connect timeout (default: 5).",
    "TASKMASTER_LLM_MAX_OUTPUT_TOKENS": "Max output tokens per call (default: 1024).",
    "TASKMASTER_LLM_TOP_P": "Nucleus sampling (default: 0.95).",
    "TASKMASTER_LLM_TOP_K": "Top-k sampling sent as an extra body field; 0 disables it (default: 40).",
    # HTTP transport
    "TASKMASTER_HTTP_HOST": "Bind address for the http transport (default: 0.0.0.0).",
    "TASKMASTER_HTTP_PORT": "Port (aliases, in order: TASK_MANAGER_HTTP_PORT, PORT; default: 3000).",
    "TASKMASTER_STATIC_DIR": "Directory served under /static when it exists (default: public).",
    # Task store
    "TASKMASTER_SEED_SAMPLE_TASKS": "Seed the three sample tasks at startup (true/false, default: true).",
}
