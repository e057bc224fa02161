"""End-to-end tests for ``sturdy deck`` subcommands.

Decks are written into the runner's isolated filesystem and passed by path,
except where the test is about the default deck lookup.
"""

import json
from pathlib import Path

import pytest

from sturdy.entrypoints.cli.main import sturdy
from tests.fixtures.decks import BROKEN_SNIPPET_DECK, SAMPLE_DECK

# pylint: disable=unused-argument,redefined-outer-name


@pytest.fixture
def deck_file(fs) -> str:
    """Write the sample deck into the isolated directory and return its name."""
    Path("talk.md").write_bytes(SAMPLE_DECK.encode("utf-8"))
    return "talk.md"


# ============================================================================
#                               outline
# ============================================================================


def test_outline_json(runner, deck_file):
    """JSON outlines list every slide with 1-based indexes."""
    result = runner.invoke(sturdy, ["deck", "outline", deck_file, "--format", "json"])
    assert result.exit_code == 0
    data = json.loads(result.stdout)
    assert data["count"] == 3
    assert data["slides"][1] == {
        "index": 2,
        "title": "Why tests break",
        "bullets": 2,
        "code_blocks": 1,
        "line": 13,
    }


def test_outline_table(runner, deck_file):
    """The default table shows titles and the slide count."""
    result = runner.invoke(sturdy, ["deck", "outline", deck_file])
    assert result.exit_code == 0
    assert "talk.md (3 slides)" in result.stdout
    for title in ("Sturdy tests", "Why tests break", "Summary"):
        assert title in result.stdout


def test_outline_uses_env_deck(runner, deck_file):
    """Without PATH, STURDY_DECK_PATH picks the deck."""
    result = runner.invoke(
        sturdy,
        ["deck", "outline", "--format", "json"],
        env={"STURDY_DECK_PATH": deck_file},
    )
    assert result.exit_code == 0
    assert json.loads(result.stdout)["count"] == 3


def test_outline_defaults_to_packaged_deck(runner, fs):
    """Without PATH or environment, the packaged deck is used."""
    result = runner.invoke(
        sturdy, ["deck", "outline", "--format", "json"], env={"STURDY_DECK_PATH": ""}
    )
    assert result.exit_code == 0
    assert json.loads(result.stdout)["count"] == 12


def test_missing_deck(runner, fs):
    """A missing file is a clean CLI error, not a traceback."""
    result = runner.invoke(sturdy, ["deck", "outline", "nope.md"])
    assert result.exit_code == 1
    assert "Deck file 'nope.md' does not exist." in result.output


def test_undecodable_deck(runner, fs):
    """A deck that is not UTF-8 is a one-line CLI error, not a traceback."""
    Path("latin1.md").write_bytes(b"# A\n\xff\xfe\n")
    result = runner.invoke(sturdy, ["deck", "check", "latin1.md"])
    assert result.exit_code == 1
    assert not isinstance(result.exception, UnicodeDecodeError)
    assert "Deck file 'latin1.md' cannot be read: not valid UTF-8" in result.output


def test_malformed_deck(runner, fs):
    """Parser errors are reported with their line."""
    Path("bad.md").write_text("# A\n\n```python\nx = 1\n", encoding="utf-8")
    result = runner.invoke(sturdy, ["deck", "check", "bad.md"])
    assert result.exit_code == 1
    assert "line 3: code fence '```' is never closed" in result.output


# ============================================================================
#                               check
# ============================================================================


def test_check_clean_deck(runner, deck_file):
    """A clean deck passes with a summary line."""
    result = runner.invoke(sturdy, ["deck", "check", deck_file])
    assert result.exit_code == 0
    assert "3 slides checked, 0 warning(s)." in result.output


def test_check_packaged_deck(runner, fs):
    """The packaged deck passes, even in strict mode."""
    result = runner.invoke(
        sturdy, ["deck", "check", "--strict"], env={"STURDY_DECK_PATH": ""}
    )
    assert result.exit_code == 0
    assert "12 slides checked" in result.output


def test_check_warnings_pass_unless_strict(runner, fs):
    """Warnings are reported; only --strict turns them into a failure."""
    Path("warn.md").write_text("---\nmarp: true\n---\njust text\n", encoding="utf-8")

    relaxed = runner.invoke(sturdy, ["deck", "check", "warn.md"])
    assert relaxed.exit_code == 0
    assert "[untitled-slide]" in relaxed.output
    assert "1 slides checked, 1 warning(s)." in relaxed.output

    strict = runner.invoke(sturdy, ["deck", "check", "--strict", "warn.md"])
    assert strict.exit_code == 1


def test_check_errors_fail(runner, fs):
    """Missing required directives fail the check."""
    Path("plain.md").write_text("# A\n", encoding="utf-8")
    result = runner.invoke(sturdy, ["deck", "check", "plain.md"])
    assert result.exit_code == 1
    assert "[missing-directive]" in result.output
    assert "checked" not in result.output


def test_check_custom_requirements(runner, deck_file):
    """--require replaces the default required directives."""
    result = runner.invoke(
        sturdy, ["deck", "check", deck_file, "--require", "marp", "--require", "size"]
    )
    assert result.exit_code == 1
    assert "front matter does not set 'size'" in result.output


# ============================================================================
#                               export
# ============================================================================


def test_export_to_stdout(runner, deck_file):
    """Verbatim export to stdout reproduces the file."""
    result = runner.invoke(sturdy, ["deck", "export", deck_file])
    assert result.exit_code == 0
    assert result.stdout == SAMPLE_DECK


def test_export_canonical_to_file(runner, deck_file):
    """Canonical export writes normalised front matter to the target file."""
    result = runner.invoke(
        sturdy, ["deck", "export", deck_file, "--canonical", "-o", "out/slides.md"]
    )
    assert result.exit_code == 0
    assert "Wrote 3 slides to out/slides.md." in result.output
    written = Path("out/slides.md").read_text(encoding="utf-8")
    assert "backgroundColor: '#fff'" in written
    assert written.endswith("## Summary\n")


def test_export_refuses_to_overwrite(runner, deck_file):
    """An existing output is kept unless --force is given."""
    Path("out.md").write_text("keep me\n", encoding="utf-8")

    refused = runner.invoke(sturdy, ["deck", "export", deck_file, "-o", "out.md"])
    assert refused.exit_code == 1
    assert "already exists. Use --force to overwrite it." in refused.output
    assert Path("out.md").read_text(encoding="utf-8") == "keep me\n"

    forced = runner.invoke(
        sturdy, ["deck", "export", deck_file, "-o", "out.md", "--force"]
    )
    assert forced.exit_code == 0
    assert Path("out.md").read_bytes() == SAMPLE_DECK.encode("utf-8")


# ============================================================================
#                               snippets
# ============================================================================


def test_snippets_lists_code(runner, deck_file):
    """Each block is printed under a header naming its slide, line and language."""
    result = runner.invoke(sturdy, ["deck", "snippets", deck_file])
    assert result.exit_code == 0
    assert "# slide 2, line 19 [python]" in result.stdout
    assert "assert status is WatchdogStatus.ENABLED" in result.stdout


def test_snippets_language_filter(runner, deck_file):
    """--lang keeps only matching blocks."""
    result = runner.invoke(sturdy, ["deck", "snippets", deck_file, "--lang", "bash"])
    assert result.exit_code == 0
    assert result.stdout == ""


def test_snippets_compile_ok(runner, deck_file):
    """--compile reports success when every Python snippet compiles."""
    result = runner.invoke(sturdy, ["deck", "snippets", deck_file, "--compile"])
    assert result.exit_code == 0
    assert "All Python snippets compile." in result.output


def test_snippets_compile_failure(runner, fs):
    """Syntax errors are reported by slide and deck line."""
    Path("broken.md").write_text(BROKEN_SNIPPET_DECK, encoding="utf-8")
    result = runner.invoke(sturdy, ["deck", "snippets", "broken.md", "--compile"])
    assert result.exit_code == 1
    assert "slide 1, line 7:" in result.output
