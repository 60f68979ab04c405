"""
Tests for the prompt store and its ownership checks
"""
import uuid
from datetime import timedelta

import pytest

from app.core.exceptions import NotFound, PermissionDenied, ValidationError
from app.models import Prompt
from app.models.user import utcnow
from app.services.access_control import AccessControlGuard
from app.services.pagination import CursorStrategy, PageNumberStrategy
from app.services.prompt_store import AllPrompts, ByCategory, PromptStore, resolve_category_filter


def _age(db, prompt_ids):
    """Spread created_at so that the first id is the oldest."""
    base = utcnow() - timedelta(days=1)
    for offset, prompt_id in enumerate(prompt_ids):
        prompt = db.query(Prompt).filter(Prompt.id == prompt_id).first()
        prompt.created_at = base + timedelta(seconds=offset)
    db.commit()


def test_create_trims_and_defaults(db, alice):
    store = PromptStore(db)
    prompt_id = store.create(alice, "  My title  ", "\n body text \t", "code")

    prompt = store.get_by_id(prompt_id, alice)
    assert prompt.title == "My title"
    assert prompt.prompt_text == "body text"
    assert prompt.category == "code"
    assert prompt.is_favorited is False
    assert prompt.created_at == prompt.updated_at


def test_create_for_unknown_user_fails(db):
    with pytest.raises(NotFound):
        PromptStore(db).create("nobody", "t", "b", "code")


def test_create_rejects_empty_text(db, alice):
    with pytest.raises(ValidationError):
        PromptStore(db).create(alice, "   ", "body", "code")
    with pytest.raises(ValidationError):
        PromptStore(db).create(alice, "title", "", "code")


def test_update_keeps_owner_and_favorite(db, alice):
    store = PromptStore(db)
    prompt_id = store.create(alice, "Old", "Old body", "code")
    store.toggle_favorite(prompt_id, alice)

    updated = store.update(prompt_id, alice, " New ", " New body ", "writing")
    assert updated.title == "New"
    assert updated.prompt_text == "New body"
    assert updated.category == "writing"
    assert updated.is_favorited is True
    assert updated.updated_at >= updated.created_at


def test_toggle_favorite(db, alice):
    store = PromptStore(db)
    prompt_id = store.create(alice, "t", "b", "code")

    assert store.toggle_favorite(prompt_id, alice) is True
    assert store.get_by_id(prompt_id, alice).is_favorited is True
    assert store.toggle_favorite(prompt_id, alice) is False
    assert store.get_by_id(prompt_id, alice).is_favorited is False


def test_delete_is_permanent(db, alice):
    store = PromptStore(db)
    prompt_id = store.create(alice, "t", "b", "code")
    store.delete(prompt_id, alice)

    with pytest.raises(NotFound):
        store.get_by_id(prompt_id, alice)


def test_missing_or_malformed_id_is_not_found(db, alice):
    store = PromptStore(db)
    with pytest.raises(NotFound):
        store.get_by_id(uuid.uuid4(), alice)
    with pytest.raises(NotFound):
        store.get_by_id("not-a-uuid", alice)


def test_other_users_are_denied_everything(db, alice, bob):
    store = PromptStore(db)
    prompt_id = store.create(alice, "Private", "Secret body", "code")

    for external_id in (bob, "never_synced"):
        with pytest.raises(PermissionDenied):
            store.get_by_id(prompt_id, external_id)
        with pytest.raises(PermissionDenied):
            store.update(prompt_id, external_id, "x", "y", "code")
        with pytest.raises(PermissionDenied):
            store.toggle_favorite(prompt_id, external_id)
        with pytest.raises(PermissionDenied):
            store.delete(prompt_id, external_id)

    prompt = store.get_by_id(prompt_id, alice)
    assert prompt.title == "Private"
    assert prompt.is_favorited is False


def test_guard_returns_loaded_prompt(db, alice):
    prompt_id = PromptStore(db).create(alice, "t", "b", "code")
    prompt = AccessControlGuard(db).authorize(str(prompt_id), alice)
    assert prompt.id == prompt_id


def test_list_favorited_newest_first(db, alice, bob):
    store = PromptStore(db)
    ids = [store.create(alice, f"t{i}", "b", "code") for i in range(4)]
    _age(db, ids)
    store.toggle_favorite(ids[0], alice)
    store.toggle_favorite(ids[2], alice)
    bob_id = store.create(bob, "bob", "b", "code")
    store.toggle_favorite(bob_id, bob)

    favorites = store.list_favorited(alice)
    assert [p.id for p in favorites] == [ids[2], ids[0]]
    assert store.list_favorited("nobody") == []


def test_resolve_category_filter():
    assert resolve_category_filter(None) == AllPrompts()
    assert resolve_category_filter("") == AllPrompts()
    assert resolve_category_filter("all") == AllPrompts()
    assert resolve_category_filter("code") == ByCategory(category="code")


def test_list_is_scoped_to_owner_and_ordered(db, alice, bob):
    store = PromptStore(db)
    ids = [store.create(alice, f"t{i}", "b", "code") for i in range(5)]
    _age(db, ids)
    store.create(bob, "bob", "b", "code")

    listing = store.list(alice, None, PageNumberStrategy(page=1, page_size=12))
    assert [p.id for p in listing.page.items] == list(reversed(ids))
    assert listing.filter == AllPrompts()


def test_list_unknown_user_is_empty(db):
    store = PromptStore(db)
    page = store.list("nobody", "all", PageNumberStrategy()).page
    assert page.items == [] and page.total == 0 and page.total_pages == 0

    cursor_page = store.list("nobody", "all", CursorStrategy()).page
    assert cursor_page.items == [] and cursor_page.has_more is False


def test_listing_scenario(db, alice):
    store = PromptStore(db)
    for i in range(8):
        store.create(alice, f"code {i}", "b", "code")
    for i in range(7):
        store.create(alice, f"writing {i}", "b", "writing")

    code = store.list(alice, "code", PageNumberStrategy(page=1, page_size=12)).page
    assert len(code.items) == 8
    assert code.total_pages == 1
    assert code.current_page == 1
    assert all(p.category == "code" for p in code.items)

    second = store.list(alice, "all", PageNumberStrategy(page=2, page_size=12)).page
    assert len(second.items) == 3
    assert second.total == 15
    assert second.total_pages == 2
    assert second.current_page == 2


def test_cursor_listing_walks_all_prompts(db, alice):
    store = PromptStore(db)
    for i in range(15):
        store.create(alice, f"t{i}", "b", "code" if i % 2 else "writing")

    expected = store.list(alice, "all", PageNumberStrategy(page=1, page_size=15)).page.items
    walked, cursor = [], None
    while True:
        page = store.list(alice, "all", CursorStrategy(cursor=cursor, page_size=4)).page
        walked.extend(page.items)
        if not page.has_more:
            break
        cursor = page.next_cursor
    assert [p.id for p in walked] == [p.id for p in expected]


def test_stale_cursor_restarts(db, alice):
    store = PromptStore(db)
    for i in range(6):
        store.create(alice, f"t{i}", "b", "code")
    first = store.list(alice, None, CursorStrategy(page_size=3)).page
    first_ids = [p.id for p in first.items]
    store.delete(first.next_cursor, alice)

    page = store.list(alice, None, CursorStrategy(cursor=first.next_cursor, page_size=3)).page
    assert page.items[0].id == first_ids[0]


def test_rejected_update_leaves_prompt_untouched(db, alice):
    store = PromptStore(db)
    prompt_id = store.create(alice, "Original", "Body", "code")

    with pytest.raises(ValidationError):
        store.update(prompt_id, alice, "Changed", "   ", "writing")
    # a later commit on the same session must not flush the rejected edit
    store.toggle_favorite(prompt_id, alice)

    db.expire_all()
    prompt = store.get_by_id(prompt_id, alice)
    assert prompt.title == "Original"
    assert prompt.prompt_text == "Body"
    assert prompt.category == "code"
    assert prompt.is_favorited is True


def test_cursor_accepts_uuid_in_any_spelling(db, alice):
    store = PromptStore(db)
    for i in range(5):
        store.create(alice, f"t{i}", "b", "code")
    first = store.list(alice, None, CursorStrategy(page_size=2)).page
    expected = store.list(alice, None, CursorStrategy(cursor=first.next_cursor, page_size=2)).page

    for spelling in (first.next_cursor.upper(), first.next_cursor.replace("-", "")):
        page = store.list(alice, None, CursorStrategy(cursor=spelling, page_size=2)).page
        assert [p.id for p in page.items] == [p.id for p in expected.items]
