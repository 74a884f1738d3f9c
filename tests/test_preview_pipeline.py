"""Tests for the preview pipeline wiring store, composition and renderer."""

import asyncio

import pytest

from playground.schemas import Language
from playground.services import PreviewPipeline, SandboxFrame, SandboxRenderer
from playground.services.sandbox import RenderStatus


@pytest.fixture()
def frame() -> SandboxFrame:
    return SandboxFrame()


@pytest.fixture()
def pipeline(store, frame) -> PreviewPipeline:
    return PreviewPipeline(store, SandboxRenderer(frame, timeout=0.01))


class TestRefresh:

    def test_refresh_loads_composed_document(self, pipeline, frame):
        result = asyncio.run(pipeline.refresh())

        assert result.status == RenderStatus.TIMED_OUT
        assert frame.document == pipeline.compose().html
        assert pipeline.last_document.html == frame.document

    def test_edit_reaches_frame(self, pipeline, store, frame):
        css_id = next(f.id for f in store.list_files() if f.name == "styles.css")
        store.update_file(css_id, "h1{color:hotpink}")

        asyncio.run(pipeline.after_edit())

        assert "h1{color:hotpink}" in frame.document

    def test_empty_project_renders_fallback(self, empty_store, frame):
        pipeline = PreviewPipeline(empty_store, SandboxRenderer(frame, timeout=0.01))

        asyncio.run(pipeline.refresh())

        assert pipeline.last_document.degraded
        assert frame.document.startswith("<!DOCTYPE html>")


class TestAfterRestore:

    def test_restore_of_active_file_rerenders(self, pipeline, store, frame):
        file_id = store.active_file_id
        initial = store.get_versions(file_id)[0]
        store.update_file(file_id, "<body>edited</body>")
        asyncio.run(pipeline.refresh())

        previous = store.get_file(file_id).content
        content = store.restore(file_id, initial.id)
        result = asyncio.run(pipeline.after_restore(file_id, previous, content))

        assert result is not None
        assert pipeline.renderer.render_id == 2
        assert "edited" not in frame.document

    def test_restore_of_inactive_file_keeps_preview(self, pipeline, store):
        other = store.add_file("other.css", Language.CSS, "a{}")
        store.update_file(other, "b{}")
        store.set_active_file(store.list_files()[0].id)

        content = store.restore(other, store.get_versions(other)[0].id)
        result = asyncio.run(pipeline.after_restore(other, "b{}", content))

        assert result is None
        assert pipeline.renderer.render_id == 0

    def test_restore_without_content_change_keeps_preview(self, pipeline, store):
        file_id = store.active_file_id
        content = store.get_file(file_id).content

        result = asyncio.run(pipeline.after_restore(file_id, content, content))

        assert result is None
        assert pipeline.renderer.render_id == 0
