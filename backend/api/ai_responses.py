"""
AI Responders: General Legislation • Internal Laws Base • Conversation Titles
============================================================================

Purpose
-------
Produces the assistant's answer for a chat query and the title of a new
conversation. Two answer paths exist, selected by the conversation's query type:

- ``internet`` → general legislative responder (OpenAI chat model through LangChain).
- ``laws``     → internal laws endpoint, an OpenAI-compatible chat-completions API.
                 On transport error, non-2xx status or an unrecognised payload the
                 question is answered by the general model with a stricter,
                 citation-only prompt. Only if that also fails is an error raised.

Nothing here touches the database.

Configuration (settings)
------------------------
- settings.API_KEY               : OpenAI API key.
- settings.OPEN_AI_MODEL         : Chat model name (default "gpt-4o").
- settings.INTERNAL_LAWS_API_URL : Laws endpoint URL.
- settings.INTERNAL_LAWS_API_KEY : Laws endpoint bearer key (defaults to API_KEY).
- settings.LAWS_API_TIMEOUT      : Request timeout for the laws endpoint (seconds).
"""

import logging
from functools import lru_cache

import httpx
from langchain_core.messages import HumanMessage, SystemMessage
from langchain_openai import ChatOpenAI

from backend.database.config.config import settings

logger = logging.getLogger(__name__)

DEFAULT_TITLE = "Nova Consulta"
TITLE_MAX_LENGTH = 40
EMPTY_ANSWER = "Desculpe, não foi possível processar sua consulta."
EMPTY_LAWS_ANSWER = "Não foi possível obter resposta da base de leis."

SAMPLING_TEMPERATURE = 0.3
ANSWER_MAX_TOKENS = 1000
LAWS_MAX_TOKENS = 1500
TITLE_MAX_TOKENS = 20

LEGISLATIVE_SYSTEM_PROMPT = """Você é um assistente especializado em legislação municipal brasileira.
Você tem acesso a uma base de dados completa de leis, decretos e portarias municipais.

Suas respostas devem:
- Ser precisas e baseadas em legislação real
- Incluir referências específicas (números de leis, artigos, decretos)
- Usar formatação Markdown para melhor legibilidade
- Ser profissionais e adequadas para funcionários públicos
- Incluir informações sobre vigência e possíveis revogações

Responda sempre em português brasileiro de forma clara e objetiva."""

LAWS_SYSTEM_PROMPT = (
    "Você é um assistente legislativo da Câmara Municipal de Cabedelo, Paraíba. "
    "Especialize-se em legislação municipal brasileira, fornecendo respostas sobre leis, decretos, "
    "portarias e regulamentações municipais. Sempre cite fontes legais específicas quando possível, "
    "incluindo números de artigos e datas de publicação."
)

LAWS_FALLBACK_SYSTEM_PROMPT = """Você é um assistente legislativo da Câmara Municipal de Cabedelo, Paraíba.
Responda EXCLUSIVAMENTE com base na legislação municipal.

Regras obrigatórias:
- Cite sempre o número da lei, decreto ou portaria e o artigo correspondente
- Informe a data de publicação e a vigência quando conhecidas
- Se não houver norma municipal aplicável, diga isso explicitamente em vez de supor
- Use formatação Markdown, com as citações legais em destaque

Responda sempre em português brasileiro."""

TITLE_SYSTEM_PROMPT = (
    "Gere um título curto e descritivo (máximo 40 caracteres) para uma conversa sobre legislação "
    "municipal baseado na primeira pergunta. Responda apenas com o título, sem aspas ou formatação adicional."
)


class AIResponseError(Exception):
    """The general language model could not produce an answer."""


class LawsDatabaseError(Exception):
    """Neither the laws endpoint nor its fallback could produce an answer."""


class LawsEndpointError(Exception):
    """The laws endpoint failed or answered in an unexpected shape."""


@lru_cache(maxsize=None)
def get_chat_model(temperature: float, max_tokens: int) -> ChatOpenAI:
    """
    Return the shared chat model client for one sampling configuration.

    Clients are long-lived and reused across requests.
    """
    return ChatOpenAI(
        model=settings.OPEN_AI_MODEL,
        api_key=settings.API_KEY,
        temperature=temperature,
        max_tokens=max_tokens,
    )


def lc_text_from_content(content) -> str:
    """Normalize LangChain message content to plain text.

    - If string → return as-is.
    - If list of content parts → concatenates only 'text' parts.
    - Else → str(content).
    """
    if isinstance(content, str):
        return content
    if isinstance(content, list):
        return "".join(p.get("text", "") for p in content if isinstance(p, dict) and p.get("type") == "text")
    return str(content)


async def _ask_chat_model(system_prompt: str, question: str, max_tokens: int) -> str:
    model = get_chat_model(SAMPLING_TEMPERATURE, max_tokens)
    response = await model.ainvoke([SystemMessage(content=system_prompt), HumanMessage(content=question)])
    return lc_text_from_content(response.content).strip()


async def generate_legislative_response(question: str) -> str:
    """
    Answer a question with the general legislative persona.

    Raises
    ------
    AIResponseError
        On any provider error. There is no retry.
    """
    try:
        answer = await _ask_chat_model(LEGISLATIVE_SYSTEM_PROMPT, question, ANSWER_MAX_TOKENS)
    except Exception as e:
        logger.exception("Error generating AI response")
        raise AIResponseError("Falha ao processar consulta com IA") from e
    return answer or EMPTY_ANSWER


def _laws_http_client() -> httpx.AsyncClient:
    return httpx.AsyncClient(timeout=settings.LAWS_API_TIMEOUT)


def _laws_request_headers() -> dict:
    headers = {"Content-Type": "application/json"}
    api_key = settings.INTERNAL_LAWS_API_KEY or settings.API_KEY
    if api_key and api_key.strip():
        headers["Authorization"] = f"Bearer {api_key.strip()}"
    return headers


def _laws_request_body(question: str) -> dict:
    return {
        "model": settings.OPEN_AI_MODEL,
        "messages": [
            {"role": "system", "content": LAWS_SYSTEM_PROMPT},
            {"role": "user", "content": question},
        ],
        "temperature": SAMPLING_TEMPERATURE,
        "max_tokens": LAWS_MAX_TOKENS,
        "top_p": 1,
        "frequency_penalty": 0,
        "presence_penalty": 0,
    }


def parse_laws_payload(data) -> str:
    """
    Extract the answer text from a laws endpoint payload.

    Accepted shapes, in order: OpenAI ``choices[0].message.content``,
    top-level ``response``, top-level ``message``.

    Raises
    ------
    LawsEndpointError
        If none of the shapes is present.
    """
    if isinstance(data, dict):
        choices = data.get("choices")
        if isinstance(choices, list) and choices and isinstance(choices[0], dict):
            message = choices[0].get("message")
            if isinstance(message, dict):
                return message.get("content") or EMPTY_LAWS_ANSWER
        if isinstance(data.get("response"), str) and data["response"]:
            return data["response"]
        if isinstance(data.get("message"), str) and data["message"]:
            return data["message"]
    raise LawsEndpointError("Formato de resposta não reconhecido")


async def _query_laws_endpoint(question: str) -> str:
    url = settings.INTERNAL_LAWS_API_URL
    logger.info("[Laws API] Calling %s", url)
    try:
        async with _laws_http_client() as client:
            response = await client.post(url, headers=_laws_request_headers(), json=_laws_request_body(question))
    except httpx.HTTPError as e:
        raise LawsEndpointError(f"Falha de conexão: {e}") from e

    if not response.is_success:
        raise LawsEndpointError(f"API de Leis retornou erro: {response.status_code}")
    try:
        data = response.json()
    except ValueError as e:
        raise LawsEndpointError("Resposta não é JSON") from e
    return parse_laws_payload(data)


async def generate_laws_response(question: str) -> str:
    """
    Answer a question from the internal laws base, falling back to the general model.

    Raises
    ------
    LawsDatabaseError
        When both the laws endpoint and the fallback fail.
    """
    try:
        return await _query_laws_endpoint(question)
    except LawsEndpointError as e:
        logger.warning("[Laws API] %s; answering with the fallback model", e)

    try:
        answer = await _ask_chat_model(LAWS_FALLBACK_SYSTEM_PROMPT, question, LAWS_MAX_TOKENS)
    except Exception as e:
        logger.exception("Error calling laws fallback model")
        raise LawsDatabaseError(f"Falha ao consultar a base de dados de leis: {e}") from e
    return answer or EMPTY_LAWS_ANSWER


async def route(question: str, query_type: str) -> str:
    """Pick the responder for a query type (``laws`` or anything else → general)."""
    if query_type == "laws":
        return await generate_laws_response(question)
    return await generate_legislative_response(question)


async def generate_conversation_title(first_message: str) -> str:
    """
    Summarize the first question into a title of at most 40 characters.

    Blank input returns the default title without calling the provider; a
    provider error or an empty completion also yields the default title.
    """
    if not first_message or not first_message.strip():
        return DEFAULT_TITLE
    try:
        title = await _ask_chat_model(TITLE_SYSTEM_PROMPT, first_message.strip(), TITLE_MAX_TOKENS)
    except Exception:
        logger.exception("Error generating conversation title")
        return DEFAULT_TITLE
    return title[:TITLE_MAX_LENGTH] or DEFAULT_TITLE
