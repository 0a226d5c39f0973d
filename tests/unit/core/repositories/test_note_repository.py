import pytest
from sqlalchemy.exc import InvalidRequestError

from src.notevault.core.repositories.note_repository import NoteRepository


@pytest.fixture
def repo(test_session):
    return NoteRepository(test_session)


async def _note(repo, owner, title="t"):
    return await repo.create_note(
        {"title": title, "description": "d", "owner_id": owner.id, "is_protected": False}
    )


@pytest.mark.asyncio
async def test_create_and_get(repo, test_session, alice):
    note = await _note(repo, alice)
    await test_session.commit()

    fetched = await repo.get_by_id(note.id)
    assert fetched.title == "t"
    assert fetched.password_hash is None
    assert await repo.get_by_id(note.id + 1) is None


@pytest.mark.asyncio
async def test_versions_are_snapshots(repo, test_session, alice):
    note = await _note(repo, alice, title="before")
    first = await repo.add_version(note)
    await repo.update_note(note, {"title": "after"})
    await test_session.commit()

    assert first.title == "before"
    assert first.note_id == note.id
    assert (await repo.get_version(first.id)).title == "before"
    assert await repo.count_versions(note.id) == 1


@pytest.mark.asyncio
async def test_list_versions_newest_first(repo, test_session, alice):
    note = await _note(repo, alice)
    ids = [(await repo.add_version(note)).id for _ in range(3)]
    await test_session.commit()

    listed = [v.id for v in await repo.list_versions(note.id)]
    assert listed == list(reversed(ids))


@pytest.mark.asyncio
async def test_delete_note_takes_versions(repo, test_session, alice):
    note = await _note(repo, alice)
    await repo.add_version(note)
    await test_session.commit()

    assert await repo.delete_note(note.id) is True
    await test_session.commit()

    assert await repo.count_versions(note.id) == 0
    assert await repo.delete_note(note.id) is False


@pytest.mark.asyncio
async def test_list_notes_paginates(repo, test_session, alice):
    for i in range(5):
        await _note(repo, alice, title=f"n{i}")
    await test_session.commit()

    first_page, total = await repo.list_notes(page=1, per_page=2)
    last_page, _ = await repo.list_notes(page=3, per_page=2)

    assert total == 5
    assert [n.title for n in first_page] == ["n4", "n3"]
    assert [n.title for n in last_page] == ["n0"]


@pytest.mark.asyncio
async def test_relationships_are_never_loaded_implicitly(repo, test_session, session_factory, alice):
    note = await _note(repo, alice)
    await repo.add_version(note)
    await test_session.commit()

    async with session_factory() as other:
        fetched = await NoteRepository(other).get_by_id(note.id)

        # owner details and history go through the repositories instead
        with pytest.raises(InvalidRequestError):
            fetched.owner
        with pytest.raises(InvalidRequestError):
            fetched.versions
        assert fetched.revision == 0
