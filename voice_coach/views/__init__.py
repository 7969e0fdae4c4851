"""Pydantic schemas used as views."""

from .common import ErrorDetail, ErrorResponse
from .interview import (
    AnswerResultView,
    InterviewAnswerData,
    InterviewAnswerResponse,
    InterviewReportResponse,
    InterviewReportView,
    QuestionView,
    StartInterviewData,
    StartInterviewRequest,
    StartInterviewResponse,
)
from .onboarding import DialectProfileView, OnboardingData, OnboardingResponse
from .profile import (
    DrillsResponse,
    DrillsView,
    ProfileResponse,
    ProfileView,
    UpdateProfileResponse,
)
from .sessions import (
    AnalysisResultView,
    AnalyzeSessionResponse,
    SessionHistoryData,
    SessionHistoryResponse,
    SessionView,
)

__all__ = [
    "AnalysisResultView",
    "AnalyzeSessionResponse",
    "AnswerResultView",
    "DialectProfileView",
    "DrillsResponse",
    "DrillsView",
    "ErrorDetail",
    "ErrorResponse",
    "InterviewAnswerData",
    "InterviewAnswerResponse",
    "InterviewReportResponse",
    "InterviewReportView",
    "OnboardingData",
    "OnboardingResponse",
    "ProfileResponse",
    "ProfileView",
    "QuestionView",
    "SessionHistoryData",
    "SessionHistoryResponse",
    "SessionView",
    "StartInterviewData",
    "StartInterviewRequest",
    "StartInterviewResponse",
    "UpdateProfileResponse",
]
