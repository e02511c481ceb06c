import logging
from typing import Any, Dict, Optional

from langchain_huggingface import HuggingFaceEndpoint, ChatHuggingFace
from langchain_core.messages import SystemMessage, HumanMessage

from .llm_client import LLMClient

logger = logging.getLogger(__name__)

class HuggingFaceChatClient(LLMClient):
    """Tutor replies from a Hugging Face hosted chat model, one invoke per message."""

    def __init__(
        self,
        *,
        repo_id: str,
        api_token: Optional[str] = None,
        max_new_tokens: int = 500,
        temperature: float = 0.7,
        timeout: int = 30,
    ):
        self.repo_id = repo_id
        endpoint: Dict[str, Any] = dict(
            repo_id=repo_id,
            task="text-generation",
            max_new_tokens=max_new_tokens,
            temperature=temperature,
            timeout=timeout,
        )
        if api_token:
            endpoint["huggingfacehub_api_token"] = api_token

        self._chat = ChatHuggingFace(llm=HuggingFaceEndpoint(**endpoint))

    def generate(self, *, system_prompt: str, user_prompt: str) -> str:
        logger.debug(f"Asking {self.repo_id} ({len(user_prompt)} chars)")
        reply = self._chat.invoke([SystemMessage(content=system_prompt), HumanMessage(content=user_prompt)])
        return str(reply.content or "")
