from backend.api import ai_responses
from backend.database.core import funcs


def ask(client, headers, question, conversation_id=None, query_type="internet"):
    body = {"question": question, "queryType": query_type}
    if conversation_id is not None:
        body["conversationId"] = conversation_id
    return client.post("/api/chat/query", json=body, headers=headers)


def test_first_question_creates_titled_conversation(client, user, auth_headers, fake_llm):
    headers = auth_headers(user)
    resp = ask(client, headers, "Qual o prazo para renovar o alvará de funcionamento?")

    assert resp.status_code == 200
    data = resp.json()
    assert data["answer"] == "Resposta: Qual o prazo para renovar o alvará de funcionamento?"
    assert data["query_type"] == "internet"

    history = client.get("/api/chat/history", headers=headers).json()
    assert len(history) == 1
    assert history[0]["id"] == data["conversation_id"]
    assert history[0]["title"] == "Título de teste"
    assert history[0]["query_type"] == "internet"

    detail = client.get(f"/api/chat/history/{data['conversation_id']}", headers=headers).json()
    assert [(m["role"], m["content"]) for m in detail["messages"]] == [
        ("user", "Qual o prazo para renovar o alvará de funcionamento?"),
        ("assistant", "Resposta: Qual o prazo para renovar o alvará de funcionamento?"),
    ]


def test_generated_title_never_exceeds_40_characters(client, user, auth_headers, fake_llm):
    def reply(messages):
        if messages[0].content == ai_responses.TITLE_SYSTEM_PROMPT:
            return "Um título muito longo sobre o código tributário do município"
        return "ok"

    fake_llm.reply = reply
    headers = auth_headers(user)
    conversation_id = ask(client, headers, "Código tributário").json()["conversation_id"]

    title = client.get(f"/api/chat/history/{conversation_id}", headers=headers).json()["title"]
    assert len(title) <= 40


def test_follow_up_appends_to_the_same_conversation(client, user, auth_headers):
    headers = auth_headers(user)
    conversation_id = ask(client, headers, "Primeira pergunta").json()["conversation_id"]

    resp = ask(client, headers, "Segunda pergunta", conversation_id=conversation_id)
    assert resp.status_code == 200
    assert resp.json()["conversation_id"] == conversation_id

    messages = client.get(f"/api/chat/history/{conversation_id}", headers=headers).json()["messages"]
    assert [m["content"] for m in messages] == [
        "Primeira pergunta",
        "Resposta: Primeira pergunta",
        "Segunda pergunta",
        "Resposta: Segunda pergunta",
    ]
    assert [m["role"] for m in messages] == ["user", "assistant", "user", "assistant"]
    assert len(client.get("/api/chat/history", headers=headers).json()) == 1


def test_follow_up_does_not_generate_a_new_title(client, user, auth_headers, fake_llm):
    headers = auth_headers(user)
    conversation_id = ask(client, headers, "Primeira pergunta").json()["conversation_id"]
    ask(client, headers, "Segunda pergunta", conversation_id=conversation_id)
    assert fake_llm.system_prompts().count(ai_responses.TITLE_SYSTEM_PROMPT) == 1


def test_conversation_of_another_user_is_not_found(client, user, make_user, auth_headers):
    owner_headers = auth_headers(user)
    conversation_id = ask(client, owner_headers, "Pergunta privada").json()["conversation_id"]

    intruder_headers = auth_headers(make_user(name="Outro Servidor"))
    assert client.get(f"/api/chat/history/{conversation_id}", headers=intruder_headers).status_code == 404
    assert client.get("/api/chat/history", headers=intruder_headers).json() == []

    resp = ask(client, intruder_headers, "Invasão", conversation_id=conversation_id)
    assert resp.status_code == 404
    assert resp.json()["detail"] == "Conversa não encontrada"

    messages = client.get(f"/api/chat/history/{conversation_id}", headers=owner_headers).json()["messages"]
    assert [m["content"] for m in messages] == ["Pergunta privada", "Resposta: Pergunta privada"]


def test_unknown_conversation_is_not_found(client, user, auth_headers):
    assert client.get("/api/chat/history/9999", headers=auth_headers(user)).status_code == 404


def test_history_is_newest_first_and_stable(client, user, auth_headers):
    headers = auth_headers(user)
    first = ask(client, headers, "Primeira").json()["conversation_id"]
    second = ask(client, headers, "Segunda").json()["conversation_id"]

    history = client.get("/api/chat/history", headers=headers).json()
    assert [c["id"] for c in history] == [second, first]
    assert client.get("/api/chat/history", headers=headers).json() == history

    ask(client, headers, "De volta à primeira", conversation_id=first)
    assert [c["id"] for c in client.get("/api/chat/history", headers=headers).json()] == [first, second]


def test_laws_query_answers_from_fallback_when_endpoint_is_down(client, user, auth_headers, laws_api, fake_llm):
    headers = auth_headers(user)
    resp = ask(client, headers, "Lei do silêncio", query_type="laws")

    assert resp.status_code == 200
    assert resp.json()["answer"] == "Fallback: Lei do silêncio"
    assert resp.json()["query_type"] == "laws"
    assert len(laws_api["requests"]) == 1
    history = client.get("/api/chat/history", headers=headers).json()
    assert history[0]["query_type"] == "laws"


def test_ai_failure_returns_500_and_keeps_the_question(client, user, auth_headers, fake_llm):
    def reply(messages):
        if messages[0].content == ai_responses.TITLE_SYSTEM_PROMPT:
            return "Título"
        raise RuntimeError("provider down")

    fake_llm.reply = reply
    resp = ask(client, auth_headers(user), "Pergunta sem resposta")

    assert resp.status_code == 500
    assert resp.json()["detail"] == "Erro ao processar consulta"
    conversations = funcs.get_user_conversations(user["id"])
    assert len(conversations) == 1
    stored = funcs.get_conversation_with_messages(conversations[0]["id"], user["id"])["messages"]
    assert [(m["role"], m["content"]) for m in stored] == [("user", "Pergunta sem resposta")]


def test_invalid_query_bodies_are_rejected(client, user, auth_headers):
    headers = auth_headers(user)
    assert ask(client, headers, "Pergunta", query_type="web").status_code == 400
    assert ask(client, headers, "").status_code == 400
    assert client.post("/api/chat/query", json={}, headers=headers).status_code == 400
    assert funcs.get_user_conversations(user["id"]) == []


def test_chat_requires_a_token(client):
    assert client.post("/api/chat/query", json={"question": "Oi"}).status_code == 401
    assert client.get("/api/chat/history").status_code == 401
