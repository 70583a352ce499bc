"""Tests for dialect detection and script block extraction."""

import pytest

from perf_wizard.scanning.dialects import (
    BUNDLE_EXTENSIONS,
    Dialect,
    detect_dialect,
    extract_script_blocks,
    get_dialect_config,
    grammar_for,
)


class TestDetectDialect:
    """Extension -> dialect mapping."""

    @pytest.mark.parametrize(
        "name,dialect",
        [
            ("app.js", Dialect.SCRIPT),
            ("lib.mjs", Dialect.SCRIPT),
            ("types.ts", Dialect.TYPED),
            ("Button.jsx", Dialect.MARKUP),
            ("Button.tsx", Dialect.MARKUP),
            ("App.vue", Dialect.MARKUP),
            ("Card.svelte", Dialect.MARKUP),
            ("README.md", Dialect.TEXT),
            ("Makefile", Dialect.TEXT),
        ],
    )
    def test_detect(self, name, dialect):
        assert detect_dialect(name) is dialect

    def test_extension_case_insensitive(self):
        assert detect_dialect("LEGACY.JS") is Dialect.SCRIPT

    def test_text_is_not_analyzable(self):
        assert not Dialect.TEXT.is_analyzable
        assert Dialect.SCRIPT.is_analyzable

    def test_embedded_flag(self):
        assert get_dialect_config("App.vue").embedded
        assert not get_dialect_config("app.js").embedded
        assert get_dialect_config("notes.txt") is None


class TestGrammarFor:
    """Grammar choice from path or dialect hint."""

    def test_path_wins(self):
        assert grammar_for(Dialect.MARKUP, "Button.jsx") == "javascript"
        assert grammar_for(Dialect.MARKUP, "Button.tsx") == "tsx"

    def test_hint_only(self):
        assert grammar_for(Dialect.SCRIPT) == "javascript"
        assert grammar_for(Dialect.TYPED) == "typescript"
        assert grammar_for(Dialect.MARKUP) == "tsx"

    def test_bundle_extensions_exclude_markup_files(self):
        assert ".vue" not in BUNDLE_EXTENSIONS
        assert ".tsx" in BUNDLE_EXTENSIONS


class TestExtractScriptBlocks:
    """Cutting <script> blocks out of Vue/Svelte markup."""

    def test_single_block_offsets(self):
        markup = "<template>\n  <p>hi</p>\n</template>\n<script>\nconst a = 1;\n</script>\n"
        (block,) = extract_script_blocks(markup)
        assert block.content == "\nconst a = 1;\n"
        assert block.line_offset == 3
        assert block.grammar == "javascript"
        assert markup[block.byte_offset :].startswith("\nconst a")

    def test_lang_attribute(self):
        blocks = extract_script_blocks(
            '<script lang="ts">let a: number;</script>\n<script setup lang=\'tsx\'>x</script>'
        )
        assert [b.grammar for b in blocks] == ["typescript", "tsx"]

    def test_byte_offset_counts_utf8(self):
        markup = "<!-- café -->\n<script>x</script>"
        (block,) = extract_script_blocks(markup)
        assert block.byte_offset == len("<!-- café -->\n<script>".encode("utf-8"))

    def test_no_script(self):
        assert extract_script_blocks("<template><div/></template>") == []
