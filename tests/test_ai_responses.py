import asyncio
import json

import httpx
import pytest

from backend.api import ai_responses
from backend.database.config.config import settings


def run(coro):
    return asyncio.run(coro)


def failing(messages):
    raise RuntimeError("provider down")


def test_blank_question_gets_default_title_without_provider_call(fake_llm):
    assert run(ai_responses.generate_conversation_title("")) == "Nova Consulta"
    assert run(ai_responses.generate_conversation_title("   \n")) == "Nova Consulta"
    assert fake_llm.calls == []


def test_title_is_truncated_to_40_characters(fake_llm):
    fake_llm.reply = lambda messages: "Lei Orgânica do Município e suas alterações recentes de 2024"
    title = run(ai_responses.generate_conversation_title("O que diz a lei orgânica?"))
    assert title == "Lei Orgânica do Município e suas alteraç"
    assert len(title) == 40
    assert fake_llm.calls[0][0].content == ai_responses.TITLE_SYSTEM_PROMPT
    assert fake_llm.calls[0][1].content == "O que diz a lei orgânica?"


def test_title_falls_back_to_default_on_provider_error_or_empty_reply(fake_llm):
    fake_llm.reply = failing
    assert run(ai_responses.generate_conversation_title("IPTU")) == "Nova Consulta"
    fake_llm.reply = lambda messages: "   "
    assert run(ai_responses.generate_conversation_title("IPTU")) == "Nova Consulta"


def test_legislative_response_uses_specialist_prompt(fake_llm):
    answer = run(ai_responses.generate_legislative_response("Qual o prazo do alvará?"))
    assert answer == "Resposta: Qual o prazo do alvará?"
    assert fake_llm.system_prompts() == [ai_responses.LEGISLATIVE_SYSTEM_PROMPT]


def test_legislative_response_error_is_raised_without_retry(fake_llm):
    fake_llm.reply = failing
    with pytest.raises(ai_responses.AIResponseError, match="Falha ao processar consulta com IA"):
        run(ai_responses.generate_legislative_response("Pergunta"))
    assert len(fake_llm.calls) == 1


def test_legislative_response_empty_content_gets_apology(fake_llm):
    fake_llm.reply = lambda messages: ""
    assert run(ai_responses.generate_legislative_response("Pergunta")) == ai_responses.EMPTY_ANSWER


def test_laws_response_from_chat_completion_payload(laws_api, fake_llm, monkeypatch):
    monkeypatch.setattr(settings, "INTERNAL_LAWS_API_KEY", "laws-key")
    laws_api["handler"] = lambda request: httpx.Response(
        200, json={"choices": [{"message": {"role": "assistant", "content": "Lei nº 1.234/2020, art. 5º"}}]}
    )

    answer = run(ai_responses.generate_laws_response("Horário do comércio?"))

    assert answer == "Lei nº 1.234/2020, art. 5º"
    assert fake_llm.calls == []
    request = laws_api["requests"][0]
    assert str(request.url) == settings.INTERNAL_LAWS_API_URL
    assert request.headers["Authorization"] == "Bearer laws-key"
    body = json.loads(request.content)
    assert body["messages"][0] == {"role": "system", "content": ai_responses.LAWS_SYSTEM_PROMPT}
    assert body["messages"][1] == {"role": "user", "content": "Horário do comércio?"}
    assert body["max_tokens"] == 1500
    assert body["temperature"] == 0.3


def test_laws_request_uses_openai_key_when_no_laws_key(laws_api, monkeypatch):
    monkeypatch.setattr(settings, "INTERNAL_LAWS_API_KEY", None)
    laws_api["handler"] = lambda request: httpx.Response(200, json={"response": "ok"})
    run(ai_responses.generate_laws_response("Pergunta"))
    assert laws_api["requests"][0].headers["Authorization"] == f"Bearer {settings.API_KEY}"


@pytest.mark.parametrize("payload, expected", [
    ({"response": "Decreto 10/2021"}, "Decreto 10/2021"),
    ({"message": "Portaria 3/2019"}, "Portaria 3/2019"),
])
def test_laws_response_alternative_shapes(laws_api, payload, expected):
    laws_api["handler"] = lambda request: httpx.Response(200, json=payload)
    assert run(ai_responses.generate_laws_response("Pergunta")) == expected


def test_laws_http_error_falls_back_to_strict_prompt(laws_api, fake_llm):
    laws_api["handler"] = lambda request: httpx.Response(500, json={"error": "boom"})
    answer = run(ai_responses.generate_laws_response("Pergunta"))
    assert answer == "Fallback: Pergunta"
    assert fake_llm.system_prompts() == [ai_responses.LAWS_FALLBACK_SYSTEM_PROMPT]


def test_laws_unreachable_falls_back(laws_api, fake_llm):
    def unreachable(request):
        raise httpx.ConnectError("connection refused", request=request)

    laws_api["handler"] = unreachable
    assert run(ai_responses.generate_laws_response("Pergunta")) == "Fallback: Pergunta"


def test_laws_unrecognised_payload_falls_back(laws_api, fake_llm):
    laws_api["handler"] = lambda request: httpx.Response(200, json={"unexpected": True})
    assert run(ai_responses.generate_laws_response("Pergunta")) == "Fallback: Pergunta"

    laws_api["handler"] = lambda request: httpx.Response(200, text="<html>erro</html>")
    assert run(ai_responses.generate_laws_response("Pergunta")) == "Fallback: Pergunta"


def test_laws_fallback_failure_raises(laws_api, fake_llm):
    fake_llm.reply = failing
    with pytest.raises(ai_responses.LawsDatabaseError, match="Falha ao consultar a base de dados de leis"):
        run(ai_responses.generate_laws_response("Pergunta"))


def test_route_dispatches_on_query_type(laws_api, fake_llm):
    laws_api["handler"] = lambda request: httpx.Response(200, json={"response": "da base de leis"})
    assert run(ai_responses.route("Pergunta", "laws")) == "da base de leis"
    assert run(ai_responses.route("Pergunta", "internet")) == "Resposta: Pergunta"
    assert len(laws_api["requests"]) == 1
