import asyncio
import logging
import time
from typing import Any, Dict, List, Optional

from langchain_core.language_models.chat_models import BaseChatModel
from langchain_core.messages import BaseMessage, HumanMessage, SystemMessage

logger = logging.getLogger(__name__)


class LLMClient:
    """
    LangChain chat-model wrapper with retry on connection failures.
    """

    def __init__(
        self,
        llm: BaseChatModel,
        max_retries: int = 3,
        retry_delay: float = 2.0,
        timeout: float = 120.0,
        label: str = "llm",
    ):
        self.llm = llm
        self.max_retries = max_retries
        self.retry_delay = retry_delay
        self.timeout = timeout
        self.label = label

    async def _invoke_with_retry(self, messages: List[BaseMessage]) -> Any:
        last_exception: Optional[Exception] = None

        for attempt in range(1, self.max_retries + 1):
            try:
                return await asyncio.wait_for(
                    self.llm.ainvoke(messages),
                    timeout=self.timeout,
                )

            except asyncio.TimeoutError:
                last_exception = TimeoutError(
                    f"Request timed out after {self.timeout}s"
                )
                logger.warning(
                    f"Attempt {attempt}/{self.max_retries}: Timeout, retrying..."
                )

            except Exception as e:
                error_msg = str(e)
                if "connect" not in error_msg.lower():
                    raise
                last_exception = e
                logger.warning(
                    f"Attempt {attempt}/{self.max_retries}: Connection error - {error_msg} ({self.label})"
                )

            if attempt < self.max_retries:
                await asyncio.sleep(self.retry_delay * attempt)

        raise last_exception or Exception("All connection attempts failed")

    async def complete(self, system: str, prompt: str) -> Dict[str, Any]:
        """
        Send a system + user message pair and return the reply with metadata.
        """
        start = time.time()
        response = await self._invoke_with_retry(
            [SystemMessage(content=system), HumanMessage(content=prompt)]
        )
        latency_ms = int((time.time() - start) * 1000)

        content = response.content
        if not isinstance(content, str):
            raise ValueError(f"Unexpected completion content: {type(content).__name__}")

        return {
            "raw": response,
            "content": content,
            "latency_ms": latency_ms,
        }


def create_llm_client(
    provider: str,
    *,
    ollama_base_url: str = "http://localhost:11434",
    ollama_model: str = "llama3.1:8b",
    openai_api_key: Optional[str] = None,
    openai_model: str = "gpt-3.5-turbo",
    temperature: float = 0.7,
    max_tokens: int = 200,
) -> Optional[LLMClient]:
    """
    Build the configured summarizer client, or None when the provider cannot be used.
    """
    provider = (provider or "").lower()

    if provider == "ollama":
        from langchain_ollama import ChatOllama

        base_url = ollama_base_url.rstrip("/")
        if base_url.endswith("/v1"):
            base_url = base_url[:-3]
        llm = ChatOllama(
            base_url=base_url,
            model=ollama_model,
            temperature=temperature,
            num_predict=max_tokens,
        )
        return LLMClient(llm, label=f"ollama:{ollama_model}")

    if provider == "openai":
        if not openai_api_key:
            logger.warning("OPENAI_API_KEY not configured, summaries disabled")
            return None
        from langchain_openai import ChatOpenAI

        llm = ChatOpenAI(
            api_key=openai_api_key,
            model=openai_model,
            temperature=temperature,
            max_tokens=max_tokens,
        )
        return LLMClient(llm, label=f"openai:{openai_model}")

    logger.warning(f"Unknown LLM provider '{provider}', summaries disabled")
    return None
