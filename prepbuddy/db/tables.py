"""
Single source of truth for database tables that exist after migrations (001).

Use these names when writing raw SQL (e.g. TRUNCATE) or when checking model registration.
"""
# All tables that exist in the DB. Must match models and migrations.
ALL_TABLE_NAMES = (
    "users",
    "categories",
    "tasks",
    "progress",
    "user_settings",
    "user_profiles",
    "quiz_results",
    "interview_sessions",
    "chat_history",
)
