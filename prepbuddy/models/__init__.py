from prepbuddy.models.category import Category
from prepbuddy.models.chat_history import ChatHistory
from prepbuddy.models.interview_session import InterviewSession
from prepbuddy.models.progress import Progress
from prepbuddy.models.quiz_result import QuizResult
from prepbuddy.models.task import Task
from prepbuddy.models.user import User
from prepbuddy.models.user_profile import UserProfile
from prepbuddy.models.user_settings import UserSettings

__all__ = [
    "Category",
    "ChatHistory",
    "InterviewSession",
    "Progress",
    "QuizResult",
    "Task",
    "User",
    "UserProfile",
    "UserSettings",
]
