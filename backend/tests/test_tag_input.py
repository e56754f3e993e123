"""Tests for the comma-separated tag input and link form validation."""
from __future__ import annotations

from linkvault.client.forms import LinkForm, validate_edit, validate_new_link
from linkvault.client.tag_input import TagInputState, parse_tags


def _type_and_commit(state: TagInputState, text: str, key: str = "Enter") -> TagInputState:
    return state.typed(text).key_down(key)


def test_parse_tags_normalizes():
    assert parse_tags("  Redux  ,  GraphQL  ") == ["redux", "graphql"]
    assert parse_tags("a, , A,b,") == ["a", "b"]
    assert parse_tags("") == []


def test_comma_separated_entry_adds_new_tags():
    state = TagInputState(tags=("react",))
    state = _type_and_commit(state, "react, node.js, typescript")
    assert state.tags == ("react", "node.js", "typescript")
    assert state.current == ""


def test_empty_and_duplicate_tokens_are_skipped():
    state = TagInputState(tags=("react", "javascript"))
    state = _type_and_commit(state, "react, , javascript, , react")
    assert state.tags == ("react", "javascript")
    assert state.current == ""


def test_tab_and_blur_commit():
    assert _type_and_commit(TagInputState(), "redux", key="Tab").tags == ("redux",)
    blurred = TagInputState().typed("redux").blur()
    assert blurred.tags == ("redux",)
    assert blurred.current == ""


def test_other_keys_do_not_commit():
    state = TagInputState().typed("red")
    assert state.key_down("x") == state


def test_backspace_on_empty_removes_last_tag():
    state = _type_and_commit(TagInputState(), "redux, vue")
    state = state.key_down("Backspace")
    assert state.tags == ("redux",)


def test_backspace_with_text_keeps_tags():
    state = TagInputState(tags=("redux",)).typed("v")
    assert state.key_down("Backspace").tags == ("redux",)


def test_backspace_on_empty_without_tags_is_noop():
    state = TagInputState()
    assert state.key_down("Backspace") == state


def test_remove_specific_tag():
    state = TagInputState(tags=("a", "b", "c"))
    assert state.remove("b").tags == ("a", "c")


def test_suggestions_filter_existing():
    state = TagInputState(tags=("react",)).typed("Ja")
    existing = ["react", "javascript", "java", "web"]
    assert state.suggestions(existing) == ["javascript", "java"]
    assert TagInputState(tags=("react",)).suggestions(existing) == ["javascript", "java", "web"]


def test_suggestion_click_adds_verbatim():
    state = TagInputState().add("web").add("web")
    assert state.tags == ("web",)


# --- Forms ---


def test_validate_new_link():
    assert validate_new_link("", "Title") == "URL is required"
    assert validate_new_link("https://x", "") == "Title is required"
    assert validate_new_link("https://x", "Title") is None


def test_validate_edit():
    assert validate_edit("") == "Title is required"
    assert validate_edit("ok") is None


def test_form_payload_commits_pending_tag():
    form = LinkForm(url="https://x", title="X", tag_input=TagInputState(tags=("a",)).typed("B"))
    assert form.create_payload() == {"url": "https://x", "title": "X", "notes": "", "tags": ["a", "b"]}
    assert form.update_payload() == {"title": "X", "notes": "", "tags": ["a", "b"]}


def test_edit_form_prefills_from_link():
    form = LinkForm.for_link({"url": "https://x", "title": "X", "notes": None, "tags": ["a"]})
    assert form.title == "X"
    assert form.notes == ""
    assert form.tag_input.tags == ("a",)
