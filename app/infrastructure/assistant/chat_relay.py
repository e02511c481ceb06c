"""Single-shot relay between the tutor chat widget and the LLM provider."""

import logging
from typing import Optional

from app.application.errors import UpstreamChatFailure
from .llm_client import LLMClient

logger = logging.getLogger(__name__)

CHAT_ERROR_MESSAGE = "حدث خطأ في الاتصال بالمساعد الذكي"
MESSAGE_REQUIRED_ERROR = "Message is required"

SYSTEM_PROMPT = """أنت مساعد تعليمي ذكي في منصة StudyForge. مهمتك مساعدة الطلاب في فهم المواد الدراسية التالية:
- الكيمياء
- الفيزياء
- اللغة العربية
- اللغة الإنجليزية
- الرياضيات

يجب أن تجيب باللغة العربية بشكل واضح ومفيد. اشرح المفاهيم بطريقة بسيطة ومناسبة للطلاب.
إذا كان لديك سياق عن الدرس الحالي، استخدمه لتقديم إجابات أكثر دقة."""


def build_system_prompt(context: Optional[str] = None) -> str:
    if context and context.strip():
        return f"{SYSTEM_PROMPT}\n\nالسياق الحالي: {context.strip()}"
    return SYSTEM_PROMPT


class ChatRelay:
    """
    Forwards one message to the LLM and returns its text. No retries and no
    streaming: any provider failure or empty reply becomes UpstreamChatFailure.
    """

    def __init__(self, llm_client: Optional[LLMClient]):
        self._llm = llm_client

    def reply(self, message: str, context: Optional[str] = None) -> str:
        if self._llm is None:
            raise UpstreamChatFailure("No LLM client configured (HF_TOKEN missing)")

        try:
            content = self._llm.generate(
                system_prompt=build_system_prompt(context),
                user_prompt=message,
            )
        except Exception as e:
            logger.error(f"Chat provider call failed: {e}", exc_info=True)
            raise UpstreamChatFailure(str(e)) from e

        content = (content or "").strip()
        if not content:
            logger.error("Chat provider returned an empty reply")
            raise UpstreamChatFailure("No response from AI")
        return content
