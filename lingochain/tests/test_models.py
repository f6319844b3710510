from lingochain.domain.models import (
    AssistantMessage,
    Conversation,
    UserMessage,
    derive_title,
    message_from_dict,
    message_to_dict,
)


def test_models_exist():
    um = UserMessage(content="hi")
    assert um.role == "user"
    am = AssistantMessage(content="hello", message_number=1)
    assert am.role == "assistant"
    assert am.is_error is False
    conv = Conversation(id=1)
    assert conv.title == "New Conversation"
    assert conv.messages == []


def test_derive_title_truncates_long_text():
    assert derive_title("short") == "short"
    assert derive_title("x" * 30) == "x" * 30
    assert derive_title("y" * 31) == "y" * 30 + "..."


def test_assistant_message_uses_browser_field_names():
    msg = AssistantMessage(content="oops", timestamp="2025-01-01T00:00:00.000Z", is_error=True)
    data = message_to_dict(msg)
    assert data == {
        "role": "assistant",
        "content": "oops",
        "timestamp": "2025-01-01T00:00:00.000Z",
        "isError": True,
    }
    numbered = message_to_dict(AssistantMessage(content="ok", message_number=3))
    assert numbered["messageNumber"] == 3
    assert "isError" not in numbered


def test_conversation_from_stored_dict():
    conv = Conversation.from_dict(
        {
            "id": 1700000000000,
            "title": "Hello",
            "timestamp": "2025-01-01T00:00:00.000Z",
            "messages": [
                {"role": "user", "content": "Hello", "timestamp": "2025-01-01T00:00:00.000Z"},
                {"role": "assistant", "content": "Hi", "timestamp": "2025-01-01T00:00:01.000Z", "messageNumber": 1},
            ],
        }
    )
    assert isinstance(conv.messages[0], UserMessage)
    assert isinstance(conv.messages[1], AssistantMessage)
    assert conv.messages[1].message_number == 1


def test_unknown_role_rejected():
    try:
        message_from_dict({"role": "system", "content": "x"})
    except ValueError as e:
        assert "system" in str(e)
    else:
        raise AssertionError("expected ValueError")
