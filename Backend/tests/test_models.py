"""
Embedded models and field cleaning (no database needed).
"""
import pytest
from pydantic import ValidationError

from studio.models import ChatMessage, ComponentCode, UIState, clean_description, clean_tags, clean_title
from studio.models.session import camelize_keys


def test_embedded_models_serialize_camel_case():
    code = ComponentCode(jsx="<A/>").to_response()
    assert set(code) == {"jsx", "css", "tsx", "version", "lastModified"}

    ui_state = UIState.model_validate({"selectedElement": "#a"}).to_response()
    assert ui_state["selectedElement"] == "#a"
    assert ui_state["viewport"] == {"width": 1200, "height": 800}


def test_chat_message_validation():
    message = ChatMessage(role="user", content="hi")
    assert message.metadata == {}
    assert message.to_response()["timestamp"]

    with pytest.raises(ValidationError):
        ChatMessage(role="system", content="hi")
    with pytest.raises(ValidationError):
        ChatMessage(role="user", content="")


def test_ui_state_rejects_unknown_theme():
    with pytest.raises(ValidationError):
        UIState.model_validate({"theme": "neon"})


def test_camelize_keys():
    assert camelize_keys({"selected_element": "x", "theme": "dark", "viewPort": 1}) == {
        "selectedElement": "x",
        "theme": "dark",
        "viewPort": 1,
    }


def test_clean_title():
    assert clean_title("  Hello ") == "Hello"
    with pytest.raises(ValueError, match="Title is required"):
        clean_title("   ")
    with pytest.raises(ValueError, match="cannot exceed 100"):
        clean_title("x" * 101)


def test_clean_description_and_tags():
    assert clean_description(None) == ""
    with pytest.raises(ValueError):
        clean_description("x" * 501)
    assert clean_tags([" ui ", "", "  ", "card"]) == ["ui", "card"]
    assert clean_tags(None) == []
