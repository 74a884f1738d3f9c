"""Unit tests for ProjectStore — the collaborator-facing transactional API.

Runs against FlakyStorage (an in-memory fake) with a fake clock and
sequential ids, bypassing the HTTP stack.
"""

import json

import pytest

from playground.core.starter import INITIAL_TAG
from playground.exceptions import InvalidNameError, ProjectFileNotFoundError, VersionNotFoundError
from playground.repositories import ProjectRepository
from playground.repositories.project_repository import ACTIVE_FILE_KEY, FILES_KEY, THEME_KEY
from playground.schemas import Language
from playground.services import ProjectStore
from tests.conftest import FakeClock, FlakyStorage, SequentialIds


def _assert_invariants(store: ProjectStore):
    files = store.list_files()
    ids = {f.id for f in files}
    assert store.active_file_id is None or store.active_file_id in ids
    assert all(f.versions for f in files)
    assert len({f.name for f in files}) == len(files)


class TestStartup:
    """Load-or-fallback behaviour on construction."""

    def test_empty_storage_yields_starter_project(self, store):
        names = [f.name for f in store.list_files()]
        assert names == ["index.html", "app.jsx", "styles.css"]
        assert store.active_file_id == store.list_files()[0].id
        assert store.editor_theme == "vs-dark"

    def test_starter_files_have_initial_version(self, store):
        for file in store.list_files():
            assert len(file.versions) == 1
            assert file.versions[0].tag == INITIAL_TAG
            assert file.versions[0].content == file.content

    def test_starter_project_is_persisted(self, store, storage):
        assert FILES_KEY in storage.data
        assert storage.data[ACTIVE_FILE_KEY] == store.active_file_id

    def test_reload_restores_previous_session(self, store, storage):
        file_id = store.add_file("extra.css", Language.CSS, "p{}")
        store.update_file(file_id, "p{margin:0}")
        store.snapshot(file_id, "styled")
        store.set_editor_theme("light")

        reloaded = ProjectStore(ProjectRepository(storage), clock=FakeClock(), id_factory=SequentialIds("r"))

        assert reloaded.state() == store.state()

    def test_corrupt_storage_falls_back_to_starter(self, clock, ids):
        storage = FlakyStorage({FILES_KEY: "{not json", ACTIVE_FILE_KEY: "x"})
        store = ProjectStore(ProjectRepository(storage), clock=clock, id_factory=ids)

        assert [f.name for f in store.list_files()] == ["index.html", "app.jsx", "styles.css"]
        # The starter replaces the corrupt record.
        assert json.loads(storage.data[FILES_KEY])[0]["name"] == "index.html"

    def test_unreadable_storage_falls_back_to_starter(self, clock, ids):
        storage = FlakyStorage()
        storage.fail_reads = True
        store = ProjectStore(ProjectRepository(storage), clock=clock, id_factory=ids)

        assert len(store.list_files()) == 3
        assert store.memory_only
        assert store.last_persistence_error is not None

    def test_unreadable_storage_never_overwrites_saved_project(self, store, storage):
        file_id = store.add_file("mine.html", Language.HTML, "precious")
        saved = storage.data[FILES_KEY]
        storage.fail_reads = True

        fresh = ProjectStore(ProjectRepository(storage), clock=FakeClock(), id_factory=SequentialIds("b"))
        fresh.update_file(fresh.list_files()[0].id, "starter edit")
        fresh.add_file("later.css", Language.CSS, "")

        assert storage.data[FILES_KEY] == saved
        storage.fail_reads = False
        reloaded = ProjectStore(ProjectRepository(storage))
        assert reloaded.get_file(file_id).content == "precious"


class TestAddFile:

    def test_add_returns_id_and_activates(self, store):
        file_id = store.add_file("about.html", Language.HTML, "<p>about</p>")
        assert store.active_file_id == file_id
        assert store.get_file(file_id).content == "<p>about</p>"

    def test_add_creates_initial_version(self, store):
        file_id = store.add_file("about.html", Language.HTML, "<p>about</p>")
        versions = store.get_versions(file_id)
        assert len(versions) == 1
        assert versions[0].tag == "initial"
        assert versions[0].content == "<p>about</p>"

    def test_add_appends_in_insertion_order(self, store):
        store.add_file("b.js", Language.JAVASCRIPT, "")
        store.add_file("a.js", Language.JAVASCRIPT, "")
        assert [f.name for f in store.list_files()][-2:] == ["b.js", "a.js"]

    def test_language_inferred_from_extension(self, store):
        file_id = store.add_file("types.tsx")
        assert store.get_file(file_id).language == Language.TYPESCRIPT

    def test_language_string_accepted(self, store):
        file_id = store.add_file("notes.txt", "javascript", "")
        assert store.get_file(file_id).language == Language.JAVASCRIPT

    def test_duplicate_name_rejected(self, empty_store):
        empty_store.add_file("a.html", Language.HTML, "<html></html>")

        with pytest.raises(InvalidNameError) as exc_info:
            empty_store.add_file("a.html", Language.HTML, "...")

        assert exc_info.value.status_code == 400
        assert len(empty_store.list_files()) == 1
        assert empty_store.list_files()[0].content == "<html></html>"

    @pytest.mark.parametrize("name", ["", " a.js", "a.js ", "src/a.js", "a\\b.js", "noextension", ".env", "trailing."])
    def test_malformed_names_rejected(self, store, name):
        before = store.state()
        with pytest.raises(InvalidNameError):
            store.add_file(name, Language.JAVASCRIPT, "")
        assert store.state() == before

    def test_unknown_language_rejected(self, store):
        before = store.state()
        with pytest.raises(InvalidNameError) as exc_info:
            store.add_file("a.py", "python")
        assert exc_info.value.details["name"] == "a.py"
        assert store.state() == before

    def test_unknown_extension_without_language_rejected(self, store):
        with pytest.raises(InvalidNameError):
            store.add_file("data.json")

    def test_add_persists(self, store, storage):
        store.add_file("about.html", Language.HTML, "<p>about</p>")
        names = [f["name"] for f in json.loads(storage.data[FILES_KEY])]
        assert "about.html" in names


class TestUpdateFile:

    def test_update_replaces_content_without_versioning(self, store):
        file_id = store.list_files()[0].id
        store.update_file(file_id, "<p>new</p>")
        assert store.get_file(file_id).content == "<p>new</p>"
        assert len(store.get_versions(file_id)) == 1

    def test_update_unknown_file_is_silent_noop(self, store, storage):
        before = store.state()
        snapshot = dict(storage.data)

        store.update_file("gone", "whatever")

        assert store.state() == before
        assert storage.data == snapshot


class TestDeleteFile:

    def test_delete_active_repoints_to_remaining_file(self, store):
        first, second, third = [f.id for f in store.list_files()]
        store.set_active_file(first)

        assert store.delete_file(first) is True

        assert store.active_file_id == second
        _assert_invariants(store)

    def test_delete_inactive_keeps_selection(self, store):
        first, second, _ = [f.id for f in store.list_files()]
        store.set_active_file(first)
        store.delete_file(second)
        assert store.active_file_id == first

    def test_delete_only_file_leaves_empty_project(self, empty_store):
        file_id = empty_store.add_file("only.html", Language.HTML, "<p></p>")
        assert empty_store.active_file_id == file_id

        empty_store.delete_file(file_id)

        assert empty_store.list_files() == []
        assert empty_store.active_file_id is None
        assert empty_store.active_file is None

    def test_delete_unknown_file_is_noop(self, store):
        assert store.delete_file("gone") is False
        assert len(store.list_files()) == 3

    def test_empty_state_survives_reload(self, empty_store, storage):
        reloaded = ProjectStore(ProjectRepository(storage))
        assert reloaded.list_files() == []
        assert reloaded.active_file_id is None

    def test_active_reference_valid_after_every_mutation(self, store):
        operations = [
            ("add", "one.html"), ("add", "two.css"), ("delete", 0), ("add", "three.js"),
            ("delete", -1), ("delete", 0), ("delete", 0), ("add", "four.html"),
            ("delete", 0), ("delete", 0), ("delete", 0),
        ]
        for op, arg in operations:
            if op == "add":
                store.add_file(arg)
            else:
                files = store.list_files()
                if files:
                    store.delete_file(files[arg].id)
            _assert_invariants(store)


class TestActiveFile:

    def test_set_active_file(self, store):
        target = store.list_files()[2].id
        store.set_active_file(target)
        assert store.active_file.id == target

    def test_set_active_unknown_raises(self, store):
        before = store.active_file_id
        with pytest.raises(ProjectFileNotFoundError):
            store.set_active_file("missing")
        assert store.active_file_id == before

    def test_set_active_none_clears_selection(self, store, storage):
        store.set_active_file(None)
        assert store.active_file_id is None
        assert ACTIVE_FILE_KEY not in storage.data


class TestVersionOperations:

    def test_snapshot_unknown_file_raises(self, store):
        with pytest.raises(ProjectFileNotFoundError):
            store.snapshot("missing")

    def test_snapshot_restore_round_trip(self, store):
        file_id = store.list_files()[0].id
        store.update_file(file_id, "checkpoint")
        version = store.snapshot(file_id, "cp")

        store.update_file(file_id, "later edit")
        content = store.restore(file_id, version.id)

        assert content == "checkpoint"
        assert store.get_file(file_id).content == "checkpoint"

    def test_restore_twice_is_idempotent(self, store):
        file_id = store.list_files()[0].id
        initial = store.get_versions(file_id)[0]
        store.update_file(file_id, "edited")

        assert store.restore(file_id, initial.id) == store.restore(file_id, initial.id)

    def test_restore_unknown_version_keeps_content(self, store):
        file_id = store.list_files()[0].id
        store.update_file(file_id, "unsaved")

        with pytest.raises(VersionNotFoundError):
            store.restore(file_id, "missing")

        assert store.get_file(file_id).content == "unsaved"

    def test_tag_unknown_version_leaves_versions_unchanged(self, store):
        file_id = store.list_files()[0].id
        store.snapshot(file_id)
        before = store.get_versions(file_id)

        with pytest.raises(VersionNotFoundError):
            store.tag(file_id, "does-not-exist", "v1")

        assert store.get_versions(file_id) == before

    def test_tag_persists(self, store, storage):
        file_id = store.list_files()[0].id
        version_id = store.get_versions(file_id)[0].id

        store.tag(file_id, version_id, "v1")

        persisted = json.loads(storage.data[FILES_KEY])[0]["versions"][0]
        assert persisted["tag"] == "v1"

    def test_versions_never_empty(self, store):
        for file in store.list_files():
            store.snapshot(file.id)
            store.restore(file.id, file.versions[0].id)
        assert all(store.get_versions(f.id) for f in store.list_files())


class TestIsolation:
    """Readers get copies; mutating them never reaches the store."""

    def test_list_files_returns_copies(self, store):
        files = store.list_files()
        files[0].content = "hacked"
        files[0].versions.clear()
        fresh = store.list_files()[0]
        assert fresh.content != "hacked"
        assert fresh.versions

    def test_get_versions_returns_copy(self, store):
        file_id = store.list_files()[0].id
        store.get_versions(file_id).clear()
        assert store.get_versions(file_id)


class TestPersistenceFailures:

    def test_write_failure_keeps_in_memory_change(self, store, storage):
        storage.fail_writes = True
        file_id = store.list_files()[0].id

        store.update_file(file_id, "kept in memory")

        assert store.get_file(file_id).content == "kept in memory"
        assert store.last_persistence_error is not None

    def test_recovery_clears_persistence_error(self, store, storage):
        file_id = store.list_files()[0].id
        storage.fail_writes = True
        store.update_file(file_id, "a")
        storage.fail_writes = False
        store.update_file(file_id, "b")

        assert store.last_persistence_error is None
        assert json.loads(storage.data[FILES_KEY])[0]["content"] == "b"


class TestTheme:

    def test_theme_persisted_verbatim(self, store, storage):
        store.set_editor_theme("solarized-light")
        assert store.editor_theme == "solarized-light"
        assert storage.data[THEME_KEY] == "solarized-light"
