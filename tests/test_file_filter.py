"""Tests for file_filter module."""

from flowvce.file_filter import (
    compile_patterns,
    get_language_hint,
    is_binary_by_content,
    is_binary_by_extension,
    matches_any_pattern,
    parse_pattern_input,
    validate_patterns,
)


class TestIsBinaryByExtension:
    def test_binary_extensions(self):
        assert is_binary_by_extension("assets/hero.png") is True
        assert is_binary_by_extension("fonts/inter.woff2") is True
        assert is_binary_by_extension("docs/brochure.pdf") is True

    def test_text_extensions(self):
        assert is_binary_by_extension("index.html") is False
        assert is_binary_by_extension("styles.css") is False
        assert is_binary_by_extension("icon.svg") is False

    def test_no_extension(self):
        assert is_binary_by_extension("CNAME") is False

    def test_case_insensitive(self):
        assert is_binary_by_extension("photo.JPG") is True


class TestIsBinaryByContent:
    def test_text_content(self):
        assert is_binary_by_content(b"<html></html>\n") is False

    def test_binary_content(self):
        assert is_binary_by_content(b"\x89PNG\r\n\x1a\n\x00") is True

    def test_null_beyond_8kb(self):
        data = b"a" * 8192 + b"\x00"
        assert is_binary_by_content(data) is False


class TestGetLanguageHint:
    def test_web_files(self):
        assert get_language_hint("index.html") == "html"
        assert get_language_hint("styles.css") == "css"
        assert get_language_hint("script.js") == "javascript"
        assert get_language_hint("App.tsx") == "typescript"
        assert get_language_hint("data.json") == "json"

    def test_special_filenames(self):
        assert get_language_hint("Dockerfile") == "dockerfile"
        assert get_language_hint(".gitignore") == "gitignore"

    def test_nested_path(self):
        assert get_language_hint("assets/js/app.mjs") == "javascript"

    def test_dot_in_folder_name(self):
        assert get_language_hint("v1.2/LICENSE") == "text"

    def test_uppercase_extension(self):
        assert get_language_hint("INDEX.HTML") == "html"

    def test_unknown_defaults_to_text(self):
        assert get_language_hint("LICENSE") == "text"
        assert get_language_hint("data.xyz") == "text"


class TestParsePatternInput:
    def test_empty_string(self):
        assert parse_pattern_input("") == []

    def test_whitespace_only(self):
        assert parse_pattern_input("   ") == []

    def test_multiple_patterns(self):
        result = parse_pattern_input(r"\.css$, \.js$")
        assert result == [r"\.css$", r"\.js$"]

    def test_ignores_empty_segments(self):
        result = parse_pattern_input(r"\.css$,,assets/,")
        assert result == [r"\.css$", "assets/"]


class TestValidatePatterns:
    def test_valid_patterns(self):
        assert validate_patterns([r"\.css$", r"assets/.*\.svg$"]) == []

    def test_invalid_pattern(self):
        errors = validate_patterns([r"[invalid", r"\.css$"])
        assert len(errors) == 1
        assert "`[invalid`" in errors[0]


class TestCompilePatterns:
    def test_skips_invalid(self):
        compiled = compile_patterns([r"\.css$", r"[bad", r"\.js$"])
        assert len(compiled) == 2


class TestMatchesAnyPattern:
    def test_matches(self):
        compiled = compile_patterns([r"\.css$", r"\.js$"])
        assert matches_any_pattern("css/style.css", compiled) is True
        assert matches_any_pattern("script.js", compiled) is True
        assert matches_any_pattern("index.html", compiled) is False

    def test_empty_patterns_matches_all(self):
        assert matches_any_pattern("anything.txt", []) is True
