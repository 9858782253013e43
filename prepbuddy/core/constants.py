"""
Centralized constants for the chat relay, tracker, quiz and interview flows.

Change windows, limits and cadences here instead of scattering literals across routes and services.
"""

# --- Chat relay ---
# History entries forwarded to each provider tier (most recent last)
PRIMARY_HISTORY_LIMIT = 10
SECONDARY_HISTORY_LIMIT = 8
# Messages of history the client sends with each request
CLIENT_HISTORY_LIMIT = 10

PROVIDER_MAX_TOKENS = 2000
PROVIDER_TEMPERATURE = 0.7
PROVIDER_TOP_P = 0.9
PRIMARY_FREQUENCY_PENALTY = 0.1
PRIMARY_PRESENCE_PENALTY = 0.1

# Stream framing shared by relay and client
SSE_DATA_PREFIX = "data: "
SSE_DONE = "[DONE]"
SSE_DONE_EVENT = b"data: [DONE]\n\n"
STREAM_MEDIA_TYPE = "text/plain; charset=utf-8"
STREAM_HEADERS = {
    "Cache-Control": "no-cache",
    "Connection": "keep-alive",
    "X-Accel-Buffering": "no",
}

# --- Chat client ---
SESSION_TITLE_MAX_CHARS = 30
WELCOME_SESSION_ID = "welcome"
WELCOME_SESSION_TITLE = "Welcome Chat"
NEW_SESSION_TITLE = "New Chat"

# --- Identity ---
DEFAULT_USER_ID = "default"

# --- Tracker ---
PROGRAM_DAYS = 100
CALENDAR_GRID_CELLS = 42  # 6 rows x 7 days

# --- Quiz ---
QUIZ_SECONDS_PER_QUESTION = 30
QUIZ_MAX_QUESTIONS = 5
QUIZ_POINTS_BY_DIFFICULTY = {"easy": 10, "medium": 20, "hard": 30}
QUIZ_UNANSWERED = -1

# --- Interview ---
INTERVIEW_DEFAULT_QUESTION_COUNT = 3
INTERVIEW_PAST_SESSIONS_LIMIT = 10
INTERVIEW_MAX_SUGGESTIONS = 3

# --- Scheduler ---
DAILY_REMINDER_JOB_ID = "daily_reminder"
