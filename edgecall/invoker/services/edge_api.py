"""
Edge API

Business wrappers over EdgeFunctionInvoker for the hosted edge functions the
mobile client calls.

Video and profile calls raise ExhaustedRetriesError on failure. Job calls
report failures as ``{"success": False, "error": message}`` instead.
"""

import logging
from typing import Any, Dict, List, Literal, Optional

from edgecall.invoker.core.exceptions import ExhaustedRetriesError, NoSessionError
from edgecall.invoker.models.request import InvocationOptions
from edgecall.invoker.services.invoker import EdgeFunctionInvoker
from edgecall.invoker.services.session_store import SessionAccessor

logger = logging.getLogger("edgecall.edge_api")

ANALYZE_TRANSCRIPTION = "analyze-transcription"
TRANSCRIBE_VIDEO = "transcribe-video"
FUTURE_JOBS = "lumi-gpt-future-jobs"
JOB_CONVERSATION_REPLY = "lumi-job-conversation-reply"
CREATE_JOB_CONVERSATION = "lumi-create-job-conversation"
RESET_JOB_CONVERSATION = "lumi-reset-job-conversation"
DELETE_JOB_CONVERSATION = "lumi-delete-job-conversation"
SYMBOLIC_PROFILE = "spotcoach-profile"

INVALID_SESSION_MESSAGE = "Session is not valid, please sign in again"

STANDARD_OPTIONS = InvocationOptions(max_retries=3, timeout_ms=30000)
# Transcription and job generation run longer.
LONG_RUNNING_OPTIONS = InvocationOptions(max_retries=3, timeout_ms=60000)
PROFILE_OPTIONS = InvocationOptions(max_retries=2, timeout_ms=60000)


class EdgeApi:
    def __init__(self, invoker: EdgeFunctionInvoker, session_accessor: SessionAccessor):
        self.invoker = invoker
        self.session_accessor = session_accessor

    async def _require_session(self, operation: str) -> None:
        session = await self.session_accessor.get_session()
        if session is None:
            logger.error(f"{operation}: no valid session")
            raise NoSessionError(INVALID_SESSION_MESSAGE)

    async def analyze_video(
        self, video_id: str, user_id: str, transcription_text: Optional[str] = None
    ) -> Any:
        """
        Run the AI analysis of a video transcription.

        Raises:
            NoSessionError: signed out or expired session
            ExhaustedRetriesError: the edge function call failed
        """
        await self._require_session("analyze_video")
        result = await self.invoker.invoke(
            ANALYZE_TRANSCRIPTION,
            {
                "videoId": video_id,
                "userId": user_id,
                "transcriptionText": transcription_text,
            },
            STANDARD_OPTIONS,
        )
        return result.unwrap()

    async def transcribe_video(
        self,
        video_id: str,
        user_id: str,
        video_url: str,
        preferred_language: Optional[str] = None,
        auto_detect_language: bool = True,
    ) -> Any:
        """
        Transcribe an uploaded video.

        Raises:
            NoSessionError: signed out or expired session
            ExhaustedRetriesError: the edge function call failed
        """
        await self._require_session("transcribe_video")
        result = await self.invoker.invoke(
            TRANSCRIBE_VIDEO,
            {
                "videoId": video_id,
                "userId": user_id,
                "videoUrl": video_url,
                "preferredLanguage": preferred_language,
                "autoDetectLanguage": auto_detect_language,
            },
            LONG_RUNNING_OPTIONS,
        )
        return result.unwrap()

    async def create_symbolic_profile(self, name: str, birth: Dict[str, Any]) -> Any:
        """
        Generate the symbolic profile from birth data.

        Args:
            name: Display name of the profile owner
            birth: date, time, latitude, longitude, timezone and optional city

        Raises:
            NoSessionError: signed out or expired session
            ExhaustedRetriesError: the edge function call failed
        """
        await self._require_session("create_symbolic_profile")
        result = await self.invoker.invoke(
            SYMBOLIC_PROFILE, {"name": name, "birth": birth}, PROFILE_OPTIONS
        )
        return result.unwrap()

    async def generate_future_jobs(
        self,
        symbolic_profile: Optional[Dict[str, Any]] = None,
        lumi_profile: Optional[Dict[str, Any]] = None,
        video_analysis: Optional[Dict[str, Any]] = None,
        extra_preferences: Optional[Dict[str, Any]] = None,
        language: Literal["fr", "en"] = "fr",
    ) -> Dict[str, Any]:
        """
        Generate future job suggestions.

        Failures are reported as ``{"success": False, "error": message}``.
        """
        await self._require_session("generate_future_jobs")
        payload = {
            "symbolic_profile": symbolic_profile or None,
            "lumi_profile": lumi_profile or None,
            "video_analysis": video_analysis or None,
            "extra_preferences": extra_preferences or None,
            "language": language or "fr",
        }
        return await self._invoke_reporting(FUTURE_JOBS, payload, LONG_RUNNING_OPTIONS)

    async def send_job_message(self, conversation_id: str, message: str) -> Dict[str, Any]:
        """Post a user message to a job conversation and return the updated conversation."""
        await self._require_session("send_job_message")
        payload = {"conversation_id": conversation_id, "message": message}
        return await self._invoke_reporting(JOB_CONVERSATION_REPLY, payload, STANDARD_OPTIONS)

    async def create_job_conversation(
        self,
        job_title: str,
        job_description: str,
        reason: str,
        sectors: Optional[List[str]] = None,
        user_description: Optional[str] = None,
    ) -> Dict[str, Any]:
        """Open a conversation about one suggested job."""
        await self._require_session("create_job_conversation")
        payload = {
            "job_title": job_title,
            "job_description": job_description,
            "reason": reason,
            "sectors": sectors or None,
            "user_description": user_description or None,
        }
        return await self._invoke_reporting(CREATE_JOB_CONVERSATION, payload, STANDARD_OPTIONS)

    async def reset_job_conversation(self, conversation_id: str) -> Dict[str, Any]:
        await self._require_session("reset_job_conversation")
        return await self._invoke_reporting(
            RESET_JOB_CONVERSATION, {"conversation_id": conversation_id}, STANDARD_OPTIONS
        )

    async def delete_job_conversation(self, conversation_id: str) -> Dict[str, Any]:
        await self._require_session("delete_job_conversation")
        return await self._invoke_reporting(
            DELETE_JOB_CONVERSATION, {"conversation_id": conversation_id}, STANDARD_OPTIONS
        )

    async def _invoke_reporting(
        self, function_name: str, payload: Dict[str, Any], options: InvocationOptions
    ) -> Dict[str, Any]:
        result = await self.invoker.invoke(function_name, payload, options)
        try:
            return result.unwrap()
        except ExhaustedRetriesError as e:
            logger.error(f"Edge function {function_name} failed: {e}")
            return {"success": False, "error": str(e)}
