from datetime import datetime

import pytest

from app.core.exceptions import InvalidArgument
from app.models.post import BasePost, PostStatus, PostType
from app.schemas.page import Order, PageRequest
from app.schemas.post import PostEntity, SheetEntity


def test_create_assigns_id_and_type(post_repo, db):
    created = post_repo.create(PostEntity(id=99, title="Hello", url="hello"))

    assert created.id == 1
    assert isinstance(created, PostEntity)
    assert db.query(BasePost).one().type == PostType.POST.value


def test_create_uses_orm_defaults(post_repo):
    created = post_repo.create(PostEntity(title="Hello", url="hello"))

    assert created.visits == 0
    assert created.likes == 0
    assert created.status == PostStatus.DRAFT
    assert created.create_time is not None
    assert created.edit_time is None


def test_variants_are_isolated(post_repo, sheet_repo):
    post = post_repo.create(PostEntity(title="Post", url="shared"))
    sheet = sheet_repo.create(SheetEntity(title="Sheet", url="shared"))

    assert post_repo.get_by_url("shared").id == post.id
    assert sheet_repo.get_by_url("shared").id == sheet.id
    assert post_repo.get_by_id(sheet.id) is None
    assert post_repo.count() == 1
    assert sheet_repo.count_by_url("shared") == 1


def test_update_missing_returns_none(post_repo):
    assert post_repo.update(PostEntity(id=404, title="Ghost", url="ghost")) is None


def test_create_ignores_counters_and_update_time(post_repo):
    created = post_repo.create(
        PostEntity(title="Hello", url="hello", visits=1000, likes=77, update_time=datetime(2030, 1, 1))
    )

    stored = post_repo.get_by_id(created.id)
    assert (stored.visits, stored.likes) == (0, 0)
    assert stored.update_time != datetime(2030, 1, 1)


def test_update_keeps_counters_and_create_time(post_repo):
    created = post_repo.create(PostEntity(title="Hello", url="hello", create_time=datetime(2024, 1, 1)))
    post_repo.update_visit(5, created.id)
    post_repo.update_likes(2, created.id)
    created = post_repo.get_by_id(created.id)

    created.visits = 0
    created.likes = 0
    created.create_time = datetime(2030, 1, 1)
    created.title = "Changed"
    updated = post_repo.update(created)

    assert updated.title == "Changed"
    assert updated.visits == 5
    assert updated.likes == 2
    assert updated.create_time == datetime(2024, 1, 1)


def test_returned_entities_are_detached(post_repo):
    created = post_repo.create(PostEntity(title="Hello", url="hello", original_content="body"))

    created.original_content = "changed in memory"
    post_repo.create(PostEntity(title="Other", url="other"))

    assert post_repo.get_by_id(created.id).original_content == "body"


def test_update_counters_report_affected_rows(post_repo, sheet_repo):
    post = post_repo.create(PostEntity(title="Hello", url="hello"))
    sheet = sheet_repo.create(SheetEntity(title="About", url="about"))

    assert post_repo.update_visit(3, post.id) == 1
    assert post_repo.update_likes(2, post.id) == 1
    assert post_repo.update_visit(3, 404) == 0
    assert post_repo.update_visit(3, sheet.id) == 0

    stored = post_repo.get_by_id(post.id)
    assert (stored.visits, stored.likes) == (3, 2)


def test_count_visit_is_none_without_rows(post_repo):
    assert post_repo.count_visit() is None
    assert post_repo.count_like() is None


def test_count_by_id_not_and_url(post_repo):
    first = post_repo.create(PostEntity(title="First", url="same"))

    assert post_repo.count_by_id_not_and_url(first.id, "same") == 0
    assert post_repo.count_by_id_not_and_url(first.id + 1, "same") == 1


def test_find_all_sorts_and_pages(post_repo):
    for day in (3, 1, 2):
        post_repo.create(PostEntity(title=f"D{day}", url=f"d{day}", create_time=datetime(2024, 1, day)))

    page = post_repo.find_all(PageRequest(page=0, page_size=2, sort=[Order.asc("create_time")]))

    assert page.total == 3
    assert [p.url for p in page.items] == ["d1", "d2"]
    assert all(isinstance(p, PostEntity) for p in page.items)


def test_find_all_rejects_unknown_sort_field(post_repo):
    with pytest.raises(InvalidArgument):
        post_repo.find_all(PageRequest(sort=[Order.desc("no_such_column")]))


def test_delete_by_id(post_repo):
    created = post_repo.create(PostEntity(title="Hello", url="hello"))

    assert post_repo.delete_by_id(created.id) is True
    assert post_repo.delete_by_id(created.id) is False
    assert post_repo.exists_by_id(created.id) is False
