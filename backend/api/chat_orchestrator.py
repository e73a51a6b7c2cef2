"""
Chat turn orchestration.

`submit_query` runs one question/answer turn:

1. resolve or create the conversation (a new one gets an AI-generated title),
2. append the user message,
3. ask the responder selected by the query type,
4. append the assistant message.

Each database step is its own transaction and runs in the thread pool, so the
event loop only waits on network I/O. There is no rollback across steps: if the
responder fails, the user message stays stored without an assistant reply.
"""

import logging

from starlette.concurrency import run_in_threadpool

from backend.api import ai_responses
from backend.database.core import funcs
from backend.database.entities.messages import ROLE_ASSISTANT, ROLE_USER

logger = logging.getLogger(__name__)


class ConversationNotFoundError(Exception):
    """The conversation does not exist or belongs to another user."""


async def submit_query(user_id: int, question: str, conversation_id: int | None = None, query_type: str = "internet") -> dict:
    """
    Process a chat question for a user.

    Returns
    -------
    dict
        ``{answer, conversation_id, query_type}``

    Raises
    ------
    ConversationNotFoundError
        If ``conversation_id`` is given but not owned by ``user_id``.
    AIResponseError, LawsDatabaseError
        When the responder fails (the user message is already stored).
    """
    if conversation_id is None:
        title = await ai_responses.generate_conversation_title(question)
        conversation = await run_in_threadpool(funcs.create_conversation, user_id, title, query_type)
        conversation_id = conversation["id"]
        logger.info("Created conversation %s for user %s", conversation_id, user_id)
    else:
        conversation = await run_in_threadpool(funcs.get_owned_conversation, conversation_id, user_id)
        if conversation is None:
            raise ConversationNotFoundError(conversation_id)

    await run_in_threadpool(funcs.create_message, conversation_id, ROLE_USER, question)

    answer = await ai_responses.route(question, query_type)

    await run_in_threadpool(funcs.create_message, conversation_id, ROLE_ASSISTANT, answer)

    return {"answer": answer, "conversation_id": conversation_id, "query_type": query_type}


def list_conversations(user_id: int) -> list[dict]:
    """History sidebar entries, newest first: ``[{id, title, date, query_type}]``."""
    return [
        {
            "id": conversation["id"],
            "title": conversation["title"],
            "date": conversation["updated_at"],
            "query_type": conversation["query_type"],
        }
        for conversation in funcs.get_user_conversations(user_id)
    ]


def get_conversation(conversation_id: int, user_id: int) -> dict:
    """
    A conversation with its ordered messages.

    Raises
    ------
    ConversationNotFoundError
        If it does not exist or belongs to another user.
    """
    conversation = funcs.get_conversation_with_messages(conversation_id, user_id)
    if conversation is None:
        raise ConversationNotFoundError(conversation_id)
    return {
        "id": conversation["id"],
        "title": conversation["title"],
        "query_type": conversation["query_type"],
        "messages": [
            {"role": message["role"], "content": message["content"], "timestamp": message["created_at"]}
            for message in conversation["messages"]
        ],
    }
