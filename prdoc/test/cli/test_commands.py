from __future__ import annotations

import json
from pathlib import Path

import pytest
import typer

from prdoc.cli.context import CLIContext
from prdoc.core.config import Config, RecordsConfig
from prdoc.core.errors import ErrorCode
from prdoc.output.console import MockConsole

FIXTURES = Path(__file__).resolve().parents[1] / "records" / "fixtures"
VALID = [
    str(FIXTURES / "pr_balances_holds.prdoc"),
    str(FIXTURES / "pr_assets_freeze.prdoc"),
]


def _ctx(config: Config | None = None, *, verbose: bool = False) -> CLIContext:
    return CLIContext(config=config or Config(), console=MockConsole(), verbose=verbose)


def _console(ctx: CLIContext) -> MockConsole:
    assert isinstance(ctx.console, MockConsole)
    return ctx.console


def _patch(monkeypatch: pytest.MonkeyPatch, module: object, ctx: CLIContext) -> None:
    monkeypatch.setattr(module, "build_context", lambda: ctx)


def test_check_passes_on_valid_records(monkeypatch: pytest.MonkeyPatch) -> None:
    import prdoc.cli.commands.check as check_cmd

    ctx = _ctx()
    _patch(monkeypatch, check_cmd, ctx)

    check_cmd.check(inputs=VALID)
    assert _console(ctx).messages == ["OK 2 records valid"]


def test_check_reports_every_error(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    import prdoc.cli.commands.check as check_cmd

    (tmp_path / "a.prdoc").write_text("crates: []\n", encoding="utf-8")
    (tmp_path / "b.prdoc").write_text("title: B\ncrates:\n  - name: x\n    bump: huge\n", encoding="utf-8")
    (tmp_path / "c.prdoc").write_text("title: C\ncrates: []\n", encoding="utf-8")

    ctx = _ctx()
    _patch(monkeypatch, check_cmd, ctx)

    with pytest.raises(typer.Exit) as exc:
        check_cmd.check(inputs=[str(tmp_path)])

    assert exc.value.exit_code == int(ErrorCode.USER_ERROR)
    console = _console(ctx)
    assert len(console.find("missing required field 'title'")) == 1
    assert len(console.find("invalid bump level 'huge'")) == 1
    assert console.messages[-1] == "2 invalid records"


def test_check_uses_configured_directory(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    import prdoc.cli.commands.check as check_cmd

    records = tmp_path / "changes"
    records.mkdir()
    (records / "one.yaml").write_text("title: One\ncrates: []\n", encoding="utf-8")

    config = Config(records=RecordsConfig(dir="changes", pattern="*.yaml"), root=tmp_path)
    ctx = _ctx(config, verbose=True)
    _patch(monkeypatch, check_cmd, ctx)

    check_cmd.check(inputs=None)
    console = _console(ctx)
    assert console.find(f"read {records / 'one.yaml'}")
    assert console.messages[-1] == "OK 1 records valid"


def test_check_strict_mode(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    import prdoc.cli.commands.check as check_cmd

    path = tmp_path / "a.prdoc"
    path.write_text(
        "title: A\ndoc:\n  - audience: Marketing\n    description: x\ncrates: []\n", encoding="utf-8"
    )
    ctx = _ctx(Config(records=RecordsConfig(strict=True)))
    _patch(monkeypatch, check_cmd, ctx)

    with pytest.raises(typer.Exit):
        check_cmd.check(inputs=[str(path)])
    assert _console(ctx).find("unknown audience 'Marketing'")


def test_changelog_to_stdout(monkeypatch: pytest.MonkeyPatch) -> None:
    import prdoc.cli.commands.changelog as changelog_cmd

    ctx = _ctx()
    _patch(monkeypatch, changelog_cmd, ctx)

    changelog_cmd.changelog(inputs=VALID, out=None, fmt="markdown", versions=None, current=None)

    md = _console(ctx).stdout
    assert md.startswith("# Changelog\n")
    assert "## Runtime Dev" in md
    assert "- pallet-assets: major" in md
    assert "- frame-support: minor" in md
    assert "- pallet-balances: major" in md


def test_changelog_json_to_file(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    import prdoc.cli.commands.changelog as changelog_cmd

    ctx = _ctx()
    _patch(monkeypatch, changelog_cmd, ctx)
    out = tmp_path / "report.json"

    changelog_cmd.changelog(
        inputs=VALID, out=out, fmt="json", versions=None, current=["pallet-assets=1.2.3"]
    )

    data = json.loads(out.read_text(encoding="utf-8"))
    bumps = {b["name"]: b for b in data["bumps"]}
    assert bumps["pallet-assets"]["bump"] == "major"
    assert bumps["pallet-assets"]["next"] == "2.0.0"
    assert _console(ctx).find(str(out))


def test_changelog_refuses_invalid_records(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    import prdoc.cli.commands.changelog as changelog_cmd

    ctx = _ctx()
    _patch(monkeypatch, changelog_cmd, ctx)
    out = tmp_path / "CHANGELOG.md"

    with pytest.raises(typer.Exit) as exc:
        changelog_cmd.changelog(
            inputs=[str(FIXTURES)], out=out, fmt="markdown", versions=None, current=None
        )

    assert exc.value.exit_code == int(ErrorCode.USER_ERROR)
    assert not out.exists()


def test_changelog_rejects_unknown_format(monkeypatch: pytest.MonkeyPatch) -> None:
    import prdoc.cli.commands.changelog as changelog_cmd

    ctx = _ctx()
    _patch(monkeypatch, changelog_cmd, ctx)

    with pytest.raises(typer.Exit) as exc:
        changelog_cmd.changelog(inputs=VALID, out=None, fmt="html", versions=None, current=None)
    assert exc.value.exit_code == int(ErrorCode.USER_ERROR)


def test_plan_prints_transitions(monkeypatch: pytest.MonkeyPatch) -> None:
    import prdoc.cli.commands.plan as plan_cmd

    ctx = _ctx()
    _patch(monkeypatch, plan_cmd, ctx)

    plan_cmd.plan(inputs=VALID, versions=None, current=["frame-support=0.3.1"])

    messages = _console(ctx).messages
    assert "frame-support: minor (0.3.1 -> 0.3.2)" in messages
    assert "pallet-assets: major" in messages
    assert "pallet-balances: major" in messages


def test_plan_rejects_bad_override(monkeypatch: pytest.MonkeyPatch) -> None:
    import prdoc.cli.commands.plan as plan_cmd

    ctx = _ctx()
    _patch(monkeypatch, plan_cmd, ctx)

    with pytest.raises(typer.Exit) as exc:
        plan_cmd.plan(inputs=VALID, versions=None, current=["frame-support"])
    assert exc.value.exit_code == int(ErrorCode.USER_ERROR)
    assert _console(ctx).find("hint: NAME=X.Y.Z")


def test_fmt_rewrites_and_checks(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    import prdoc.cli.commands.fmt as fmt_cmd

    path = tmp_path / "a.prdoc"
    path.write_text("crates: [{name: x, bump: patch}]\ntitle:   A  \n", encoding="utf-8")

    ctx = _ctx()
    _patch(monkeypatch, fmt_cmd, ctx)
    with pytest.raises(typer.Exit):
        fmt_cmd.fmt(inputs=[str(path)], check=True)
    assert _console(ctx).find("would reformat")

    ctx = _ctx()
    _patch(monkeypatch, fmt_cmd, ctx)
    fmt_cmd.fmt(inputs=[str(path)], check=False)
    assert path.read_text(encoding="utf-8") == "title: A\ncrates:\n- name: x\n  bump: patch\n"

    ctx = _ctx()
    _patch(monkeypatch, fmt_cmd, ctx)
    fmt_cmd.fmt(inputs=[str(path)], check=True)
    assert _console(ctx).messages == ["OK 1 records already formatted"]


@pytest.mark.parametrize(
    ("text", "lost"),
    [
        (
            "title: A\nmigrations:\n  db: []\ncrates:\n- name: x\n  bump: patch\n",
            "migrations",
        ),
        (
            "title: A\ncrates:\n- name: x\n  bump: patch\n  validate: false\n",
            "crates[0].validate",
        ),
        ("# Schema: prdoc v1\ntitle: A\ncrates:\n- name: x\n  bump: patch\n", "comments"),
    ],
)
def test_fmt_refuses_lossy_rewrite(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch, text: str, lost: str
) -> None:
    import prdoc.cli.commands.fmt as fmt_cmd

    path = tmp_path / "a.prdoc"
    path.write_text(text, encoding="utf-8")

    for check in (True, False):
        ctx = _ctx()
        _patch(monkeypatch, fmt_cmd, ctx)
        with pytest.raises(typer.Exit) as exc:
            fmt_cmd.fmt(inputs=[str(path)], check=check)
        assert exc.value.exit_code == int(ErrorCode.USER_ERROR)
        assert _console(ctx).find(f"cannot format {path} losslessly: {lost}")
        assert not _console(ctx).find("reformat")

    assert path.read_text(encoding="utf-8") == text


def test_fmt_keeps_audience_list(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    import prdoc.cli.commands.fmt as fmt_cmd

    path = tmp_path / "a.prdoc"
    path.write_text(
        "title: A\n"
        "doc:\n"
        "  - audience: [Runtime Dev, Runtime User]\n"
        "    description: shared\n"
        "crates: []\n",
        encoding="utf-8",
    )

    ctx = _ctx()
    _patch(monkeypatch, fmt_cmd, ctx)
    fmt_cmd.fmt(inputs=[str(path)], check=False)

    assert path.read_text(encoding="utf-8") == (
        "title: A\n"
        "doc:\n"
        "- audience:\n"
        "  - Runtime Dev\n"
        "  - Runtime User\n"
        "  description: shared\n"
        "crates: []\n"
    )
    assert _console(ctx).find(f"reformatted {path}")
