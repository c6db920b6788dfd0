"""Style aggregation tests (fake style compiler)."""

import asyncio
import threading

import pytest

from app_compiler.contexts.build_pipeline.domain.models import FailureKind, Pipeline, Stylesheet, StylesheetEntry
from app_compiler.contexts.build_pipeline.infrastructure.style_aggregator import StyleAggregator
from app_compiler.infra.exceptions import SourceRootMissingError
from tests.fakes import FakeStyleCompiler


def write(path, text=""):
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text)
    return path


class TestStylesheetRender:
    def test_provenance_comment_per_non_empty_entry(self):
        sheet = Stylesheet(
            entries=[
                StylesheetEntry("/a.scss", ".a{}"),
                StylesheetEntry("/empty.scss", ""),
                StylesheetEntry("/b.scss", ".b{}"),
            ]
        )

        assert sheet.render() == "/* File: /a.scss */\n.a{}\n/* File: /b.scss */\n.b{}\n"

    def test_compressed_has_no_comments(self):
        sheet = Stylesheet(
            entries=[StylesheetEntry("/a.scss", ".a{}"), StylesheetEntry("/b.scss", ".b{}")],
            compressed=True,
        )

        assert sheet.render() == ".a{}.b{}"

    def test_whitespace_only_output_counts_as_empty(self):
        sheet = Stylesheet(entries=[StylesheetEntry("/blank.scss", "\n")])
        assert sheet.render() == ""


class TestBuildStyles:
    @pytest.mark.asyncio
    async def test_button_and_empty_partial_scenario(self, build_config, project_tree):
        write(project_tree / "scss" / "button.scss", ".btn { color: red; }")
        write(project_tree / "scss" / "empty.scss")
        compiler = FakeStyleCompiler({"button.scss": ".btn{color:red}", "empty.scss": ""})

        outcome = await StyleAggregator(build_config, compiler).build()

        assert outcome.ok
        assert outcome.pipeline is Pipeline.STYLES
        content = (project_tree / "app" / "styles.css").read_text()
        assert content == "/* File: /button.scss */\n.btn{color:red}\n"

    @pytest.mark.asyncio
    async def test_entries_follow_discovery_order(self, build_config, project_tree):
        write(project_tree / "scss" / "z_last.scss")
        write(project_tree / "scss" / "a_first.scss")
        write(project_tree / "scss" / "m" / "nested.sass")
        write(project_tree / "scss" / "notes.txt")

        compiler = FakeStyleCompiler()
        await StyleAggregator(build_config, compiler).build()

        assert compiler.compiled_names == ["a_first.scss", "nested.sass", "z_last.scss"]
        content = (project_tree / "app" / "styles.css").read_text()
        assert content.count("/* File: ") == 3
        assert content.index("/a_first.scss") < content.index("/m/nested.sass") < content.index("/z_last.scss")

    @pytest.mark.asyncio
    async def test_compressed_mode(self, make_config, project_tree):
        write(project_tree / "scss" / "a.scss")
        write(project_tree / "scss" / "b.scss")
        compiler = FakeStyleCompiler({"a.scss": ".a{x:1}", "b.scss": ".b{y:2}"})

        await StyleAggregator(make_config(compress=True), compiler).build()

        assert (project_tree / "app" / "styles.css").read_text() == ".a{x:1}.b{y:2}"
        assert all(compressed for _, _, compressed in compiler.calls)

    @pytest.mark.asyncio
    async def test_import_paths_are_every_distinct_source_directory(self, build_config, project_tree):
        write(project_tree / "scss" / "main.scss")
        write(project_tree / "scss" / "base" / "_reset.scss")
        write(project_tree / "scss" / "base" / "_type.scss")
        write(project_tree / "scss" / "components" / "_card.scss")

        compiler = FakeStyleCompiler()
        await StyleAggregator(build_config, compiler).build()

        expected = (
            project_tree / "scss" / "base",
            project_tree / "scss" / "components",
            project_tree / "scss",
        )
        assert all(include_paths == expected for _, include_paths, _ in compiler.calls)

    @pytest.mark.asyncio
    async def test_import_paths_track_the_current_listing(self, build_config, project_tree):
        write(project_tree / "scss" / "main.scss")
        compiler = FakeStyleCompiler()
        aggregator = StyleAggregator(build_config, compiler)
        await aggregator.build()

        write(project_tree / "scss" / "vendor" / "_grid.scss")
        await aggregator.build()

        assert project_tree / "scss" / "vendor" in compiler.calls[-1][1]

    @pytest.mark.asyncio
    async def test_compile_error_fails_fast_without_writing(self, build_config, project_tree):
        write(project_tree / "scss" / "a.scss")
        write(project_tree / "scss" / "b.scss")
        write(project_tree / "scss" / "c.scss")
        compiler = FakeStyleCompiler(failures={"b.scss"})

        outcome = await StyleAggregator(build_config, compiler).build()

        assert not outcome.ok
        assert outcome.failure.kind is FailureKind.COMPILE
        assert "b.scss" in outcome.failure.detail
        assert outcome.exit_code == 1
        assert compiler.compiled_names == ["a.scss", "b.scss"]
        assert not (project_tree / "app" / "styles.css").exists()

    @pytest.mark.asyncio
    async def test_failed_rebuild_keeps_previous_stylesheet(self, build_config, project_tree):
        write(project_tree / "scss" / "a.scss")
        compiler = FakeStyleCompiler({"a.scss": ".a{}"})
        aggregator = StyleAggregator(build_config, compiler)
        await aggregator.build()

        compiler.failures.add("a.scss")
        outcome = await aggregator.build()

        assert not outcome.ok
        assert (project_tree / "app" / "styles.css").read_text() == "/* File: /a.scss */\n.a{}\n"

    @pytest.mark.asyncio
    async def test_missing_style_root_is_filesystem_failure(self, make_config):
        aggregator = StyleAggregator(make_config(style_dir="no-such-dir"), FakeStyleCompiler())

        with pytest.raises(SourceRootMissingError):
            await aggregator.collect_units()

        outcome = await aggregator.build()
        assert outcome.failure.kind is FailureKind.FILESYSTEM

    @pytest.mark.asyncio
    async def test_rebuild_is_idempotent(self, build_config, project_tree):
        write(project_tree / "scss" / "a.scss")
        write(project_tree / "scss" / "sub" / "b.scss")
        aggregator = StyleAggregator(build_config, FakeStyleCompiler())

        await aggregator.build()
        first = (project_tree / "app" / "styles.css").read_bytes()
        await aggregator.build()

        assert (project_tree / "app" / "styles.css").read_bytes() == first

    @pytest.mark.asyncio
    async def test_custom_stylesheet_name(self, make_config, project_tree):
        write(project_tree / "scss" / "a.scss")
        await StyleAggregator(make_config(stylesheet_name="bundle.css"), FakeStyleCompiler()).build()

        assert (project_tree / "app" / "bundle.css").exists()


class TestRequestRebuild:
    @pytest.mark.asyncio
    async def test_requests_during_a_run_are_coalesced(self, build_config, project_tree):
        write(project_tree / "scss" / "a.scss")
        compiler = FakeStyleCompiler()
        compiler.gate = threading.Event()
        aggregator = StyleAggregator(build_config, compiler)

        first = aggregator.request_rebuild()
        await asyncio.sleep(0.05)  # first run is now blocked inside the compiler
        second = aggregator.request_rebuild()
        third = aggregator.request_rebuild()
        compiler.gate.set()

        outcomes = await asyncio.gather(first, second, third)

        assert second is first and third is first
        assert all(outcome.ok for outcome in outcomes)
        assert len(compiler.calls) == 2
