"""Request dispatch over a conversation store: typed requests in, success/error envelopes out"""

from enum import Enum
from typing import Any, Callable

from loguru import logger
from pydantic import ValidationError

from chatsaver.core.models import Conversation
from chatsaver.crud.store import ConversationStore


class RequestType(str, Enum):
    SAVE_CONVERSATION = "SAVE_CONVERSATION"
    GET_STATS = "GET_STATS"
    GET_ALL_CONVERSATIONS = "GET_ALL_CONVERSATIONS"
    GET_CONVERSATION = "GET_CONVERSATION"
    DELETE_CONVERSATION = "DELETE_CONVERSATION"
    SEARCH_CONVERSATIONS = "SEARCH_CONVERSATIONS"


class RequestError(Exception):
    """A request that cannot be served; the message is returned to the caller."""


def _save(store: ConversationStore, request: dict) -> dict:
    data = request.get("conversation")
    if not isinstance(data, dict) or not data.get("id"):
        raise RequestError("Invalid conversation data")
    try:
        conv = Conversation.model_validate(data)
    except ValidationError as e:
        raise RequestError("Invalid conversation data") from e
    return {"result": store.put(conv).to_record()}


def _stats(store: ConversationStore, request: dict) -> dict:
    return {"stats": store.stats()}


def _get_all(store: ConversationStore, request: dict) -> dict:
    return {"conversations": [c.to_record() for c in store.list()]}


def _get(store: ConversationStore, request: dict) -> dict:
    conv = store.get(request.get("id") or "")
    return {"conversation": conv.to_record() if conv else None}


def _delete(store: ConversationStore, request: dict) -> dict:
    store.delete(request.get("id") or "")
    return {}


def _search(store: ConversationStore, request: dict) -> dict:
    return {"conversations": [c.to_record() for c in store.search(request.get("query") or "")]}


HANDLERS: dict[RequestType, Callable[[ConversationStore, dict], dict]] = {
    RequestType.SAVE_CONVERSATION:     _save,
    RequestType.GET_STATS:             _stats,
    RequestType.GET_ALL_CONVERSATIONS: _get_all,
    RequestType.GET_CONVERSATION:      _get,
    RequestType.DELETE_CONVERSATION:   _delete,
    RequestType.SEARCH_CONVERSATIONS:  _search,
}


def handle_request(store: ConversationStore, request: dict[str, Any]) -> dict[str, Any]:
    """Serve one request. Never raises: failures come back as {"success": False, "error": msg}."""
    if not isinstance(request, dict) or not request.get("type"):
        return {"success": False, "error": "Missing request type"}

    try:
        kind = RequestType(request["type"])
    except ValueError:
        return {"success": False, "error": f"Unknown request type: {request['type']}"}

    try:
        payload = HANDLERS[kind](store, request)
    except RequestError as e:
        logger.error(f"{kind.value} failed: {e}")
        return {"success": False, "error": str(e)}
    except Exception as e:
        logger.exception(f"{kind.value} failed")
        return {"success": False, "error": str(e) or type(e).__name__}

    return {"success": True, **payload}
