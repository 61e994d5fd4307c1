from __future__ import annotations

import json
import textwrap
from pathlib import Path

import class_extractor.cli as cli_module
from class_extractor.cli import cli


def _write(tmp_path: Path, filename: str, content: str) -> Path:
    path = tmp_path / filename
    path.write_text(textwrap.dedent(content).lstrip(), encoding="utf-8")
    return path


def _write_pyproject(base: Path, body: str) -> Path:
    path = base / "pyproject.toml"
    path.write_text(textwrap.dedent(body).lstrip(), encoding="utf-8")
    return path


def test_scan_prints_sorted_classes(cli_runner, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    target = _write(
        tmp_path,
        "index.html",
        """
        <div class="p-4 flex">
          <span class="hover:(bg-1 text-2)"></span>
        </div>
        """,
    )

    result = cli_runner.invoke(cli, ["scan", str(target)])

    assert result.exit_code == 0
    assert result.output.splitlines() == ["flex", "hover:bg-1", "hover:text-2", "p-4"]


def test_scan_json_output(cli_runner, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    target = _write(tmp_path, "App.tsx", "export const App = () => <p className={cn('b a')} />\n")

    result = cli_runner.invoke(cli, ["scan", "--json", str(target)])

    assert result.exit_code == 0
    assert json.loads(result.output) == ["a", "b"]


def test_scan_merges_classes_across_files(cli_runner, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    first = _write(tmp_path, "a.html", '<div class="shared one"></div>\n')
    second = _write(tmp_path, "b.vue", '<template><div class="shared two" /></template>\n')

    result = cli_runner.invoke(cli, ["scan", str(first), str(second)])

    assert result.exit_code == 0
    assert result.output.splitlines() == ["one", "shared", "two"]


def test_scan_accepts_relative_paths(cli_runner, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    (tmp_path / "src").mkdir()
    _write(tmp_path / "src", "main.js", "el.className = clsx('a')\n")

    result = cli_runner.invoke(cli, ["scan", "src/main.js"])

    assert result.exit_code == 0
    assert result.output == "a\n"


def test_scan_rejects_unsupported_files(cli_runner, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    target = _write(tmp_path, "notes.txt", 'class="a"\n')

    result = cli_runner.invoke(cli, ["scan", str(target)])

    assert result.exit_code != 0
    assert "unsupported file type" in result.output


def test_scan_requires_existing_file(cli_runner, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)

    result = cli_runner.invoke(cli, ["scan", "missing.html"])

    assert result.exit_code != 0
    assert "does not exist" in result.output


def test_scan_reports_invalid_utf8(cli_runner, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    target = tmp_path / "broken.html"
    target.write_bytes(b'<div class="a">\xff</div>')

    result = cli_runner.invoke(cli, ["scan", str(target)])

    assert result.exit_code == 1
    assert "Invalid UTF-8 sequence" in result.output


def test_scan_warns_when_file_is_truncated(cli_runner, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    target = _write(tmp_path, "long.html", 'class="a"' + " " * 64 + 'class="b"\n')

    result = cli_runner.invoke(cli, ["scan", "--max-input-bytes", "32", str(target)])

    assert result.exit_code == 0
    assert "a\n" in result.output
    assert "b\n" not in result.output
    assert "only the beginning of the file was scanned" in result.output


def test_scan_max_matches_option(cli_runner, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    target = _write(tmp_path, "page.html", '<p class="a b c">\n')

    result = cli_runner.invoke(cli, ["scan", "--max-matches", "2", str(target)])

    assert result.exit_code == 0
    assert result.output.splitlines() == ["a", "b"]


def test_scan_rejects_invalid_limit(cli_runner, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    target = _write(tmp_path, "page.html", '<p class="a">\n')

    result = cli_runner.invoke(cli, ["scan", "--max-matches", "0", str(target)])

    assert result.exit_code != 0
    assert "`max_matches` must be a positive integer" in result.output


def test_scan_reads_limits_from_environment(cli_runner, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("CLASS_EXTRACTOR_MAX_MATCHES", "1")
    target = _write(tmp_path, "page.html", '<p class="a b">\n')

    result = cli_runner.invoke(cli, ["scan", str(target)])

    assert result.exit_code == 0
    assert result.output.splitlines() == ["a"]


def test_scan_flags_override_environment(cli_runner, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("CLASS_EXTRACTOR_MAX_MATCHES", "1")
    target = _write(tmp_path, "page.html", '<p class="a b">\n')

    result = cli_runner.invoke(cli, ["scan", "--max-matches", "5", str(target)])

    assert result.exit_code == 0
    assert result.output.splitlines() == ["a", "b"]


def test_scan_rejects_invalid_environment(cli_runner, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("CLASS_EXTRACTOR_MAX_INPUT_BYTES", "lots")
    target = _write(tmp_path, "page.html", '<p class="a">\n')

    result = cli_runner.invoke(cli, ["scan", str(target)])

    assert result.exit_code == 1
    assert "CLASS_EXTRACTOR_MAX_INPUT_BYTES" in result.output


def test_scan_reads_config_from_pyproject(cli_runner, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    _write_pyproject(
        tmp_path,
        """
        [tool.class-extractor]
        call_names = ["cx"]
        expand_variant_groups = false
        """,
    )
    target = _write(tmp_path, "app.jsx", "cx('a hover:(b)') + clsx('ignored')\n")

    result = cli_runner.invoke(cli, ["scan", str(target)])

    assert result.exit_code == 0
    assert result.output.splitlines() == ["a", "hover:(b)"]


def test_scan_rejects_invalid_config(cli_runner, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    _write_pyproject(
        tmp_path,
        """
        [tool.class-extractor]
        unknown = 1
        """,
    )
    target = _write(tmp_path, "page.html", '<p class="a">\n')

    result = cli_runner.invoke(cli, ["scan", str(target)])

    assert result.exit_code != 0
    assert "Unknown setting in `[tool.class-extractor]`" in result.output


def test_minify_prints_css(cli_runner, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    target = _write(
        tmp_path,
        "app.css",
        """
        /* build output */
        .p-4 {
          padding: 1rem;
        }
        """,
    )

    result = cli_runner.invoke(cli, ["minify", str(target)])

    assert result.exit_code == 0
    assert result.output == ".p-4{padding:1rem}\n"


def test_minify_rejects_non_css(cli_runner, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    target = _write(tmp_path, "index.html", "<p>\n")

    result = cli_runner.invoke(cli, ["minify", str(target)])

    assert result.exit_code != 0
    assert "unsupported file type" in result.output


def test_minify_enforces_size_limit(cli_runner, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("CLASS_EXTRACTOR_MAX_INPUT_BYTES", "8")
    target = _write(tmp_path, "app.css", ".a { color: red; }\n")

    result = cli_runner.invoke(cli, ["minify", str(target)])

    assert result.exit_code == 1
    assert "larger than the 8-byte limit" in result.output


def test_minify_reports_invalid_utf8(cli_runner, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    target = tmp_path / "app.css"
    target.write_bytes(b".a{content:'\xff'}")

    result = cli_runner.invoke(cli, ["minify", str(target)])

    assert result.exit_code == 1
    assert "Invalid UTF-8 sequence" in result.output


def test_cli_public_api():
    assert cli_module.__all__ == ["cli"]
