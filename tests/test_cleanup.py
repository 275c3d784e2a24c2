import asyncio

from dictionary_backend.app.models import (
    Audio,
    DefinitionAudio,
    ExampleAudio,
    LanguageCode,
    SourceType,
    WordDetailsAudio,
)
from dictionary_backend.app.services.cleanup_service import (
    CleanupService,
    cleanup_audio,
    delete_orphaned_audio,
    get_orphaned_audio_ids,
)


def make_audio(db, name):
    audio = Audio(url=f"https://cdn.test/{name}.mp3", source=SourceType.admin, language_code=LanguageCode.da)
    db.add(audio)
    db.flush()
    return audio


def seed(db, add_word):
    ids = add_word(examples=["Hunden gør."])
    details_audio = make_audio(db, "details")
    definition_audio = make_audio(db, "definition")
    example_audio = make_audio(db, "example")
    orphan_a = make_audio(db, "orphan-a")
    orphan_b = make_audio(db, "orphan-b")
    db.add_all([
        WordDetailsAudio(word_details_id=ids["word_details_id"], audio_id=details_audio.id),
        DefinitionAudio(definition_id=ids["definition_id"], audio_id=definition_audio.id),
        ExampleAudio(example_id=ids["example_ids"][0], audio_id=example_audio.id),
    ])
    db.commit()
    return {
        "kept": {details_audio.id, definition_audio.id, example_audio.id},
        "orphans": [orphan_a.id, orphan_b.id],
    }


def test_finds_only_unreferenced_audio(db_session, add_word):
    seeded = seed(db_session, add_word)
    assert get_orphaned_audio_ids(db_session) == seeded["orphans"]


def test_cleanup_removes_orphans_and_is_idempotent(db_session, add_word):
    seeded = seed(db_session, add_word)
    assert cleanup_audio(db_session) == 2
    assert {a.id for a in db_session.query(Audio).all()} == seeded["kept"]
    assert cleanup_audio(db_session) == 0


def test_delete_with_no_ids(db_session):
    assert delete_orphaned_audio(db_session, []) == 0


def test_cleanup_endpoints(client, admin_headers, db_session, add_word):
    seed(db_session, add_word)
    res = client.post("/admin/cleanup/audio", headers=admin_headers)
    assert res.json() == {"deleted_audio": 2}

    make_audio(db_session, "late-orphan")
    db_session.commit()
    res = client.post("/admin/cleanup/run-all", headers=admin_headers)
    assert res.json() == {"results": {"audio": 1}}


def test_cleanup_endpoints_require_admin(client, auth_headers):
    assert client.post("/admin/cleanup/audio", headers=auth_headers).status_code == 403


def test_get_instance_is_a_singleton():
    assert CleanupService.get_instance() is CleanupService.get_instance()


def test_initialize_runs_immediately_and_only_once():
    calls = []
    service = CleanupService(audio_cleanup=lambda: calls.append("run") or 0)

    async def scenario():
        assert service.initialize(enable_audio_cleanup=True, interval_seconds=3600) is True
        assert service.initialize(enable_audio_cleanup=True, interval_seconds=3600) is False
        for _ in range(200):
            if calls:
                break
            await asyncio.sleep(0.01)
        await service.shutdown()

    asyncio.run(scenario())
    assert calls == ["run"]
    assert service.is_initialized is False


def test_initialize_without_audio_cleanup_schedules_nothing():
    calls = []
    service = CleanupService(audio_cleanup=lambda: calls.append("run") or 0)

    async def scenario():
        assert service.initialize(enable_audio_cleanup=False) is True
        await asyncio.sleep(0.05)
        await service.shutdown()

    asyncio.run(scenario())
    assert calls == []


def test_failing_cleanup_does_not_stop_the_loop():
    calls = []

    def flaky():
        calls.append("run")
        raise RuntimeError("database is gone")

    service = CleanupService(audio_cleanup=flaky)

    async def scenario():
        service.initialize(enable_audio_cleanup=True, interval_seconds=0.01)
        for _ in range(200):
            if len(calls) >= 2:
                break
            await asyncio.sleep(0.01)
        await service.shutdown()

    asyncio.run(scenario())
    assert len(calls) >= 2
