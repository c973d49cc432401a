"""Tests for relcut.output.console module."""

from __future__ import annotations

import pytest

from relcut.output.console import ConsoleProtocol, MockConsole, RichConsole, Style


class TestMockConsole:
    def test_prefixes(self) -> None:
        console = MockConsole()
        console.success("released 1.2.3")
        console.error("push rejected")
        console.warning("nothing to upload")
        console.info("resumed")

        assert console.messages == [
            "OK released 1.2.3",
            "error: push rejected",
            "warning: nothing to upload",
            "info: resumed",
        ]
        assert console.has_error()

    def test_find_and_text(self) -> None:
        console = MockConsole()
        console.print("git commit -m 'Release version 1.2.3'", Style.DIM)
        console.newline()
        console.header("Publish dist")

        assert [o.style for o in console.find("git commit")] == [Style.DIM]
        assert console.text == "git commit -m 'Release version 1.2.3'\n\nPublish dist"
        assert not console.has_error()

    def test_satisfies_protocol(self) -> None:
        console: ConsoleProtocol = MockConsole()
        console.print("ok")


class TestRichConsole:
    def test_brackets_are_printed_verbatim(self, capsys: pytest.CaptureFixture[str]) -> None:
        console = RichConsole()
        console.print("! [rejected] master -> master (fetch first)", Style.DIM)
        console.error("[bold]not markup[/bold]")

        out = capsys.readouterr().out
        assert "! [rejected] master -> master (fetch first)" in out
        assert "error: [bold]not markup[/bold]" in out

    def test_success_prefix(self, capsys: pytest.CaptureFixture[str]) -> None:
        RichConsole().success("pushed master to origin")
        assert "OK pushed master to origin" in capsys.readouterr().out
