from __future__ import annotations

from pathlib import Path
from typing import Callable

from click.testing import CliRunner
from pptx import Presentation
from pypdf import PdfReader

from pdf_pagekit.cli import cli


def _flat(output: str) -> str:
    return " ".join(output.split())


def test_info_command(sample_pdf: Path) -> None:
    result = CliRunner().invoke(cli, ["info", str(sample_pdf)])

    assert result.exit_code == 0
    assert "Number of Pages" in _flat(result.output)
    assert "Sample" in _flat(result.output)


def test_split_range_command(sample_pdf: Path, tmp_path: Path) -> None:
    output_dir = tmp_path / "parts"

    result = CliRunner().invoke(
        cli, ["split", str(sample_pdf), "-m", "range", "-v", "1-2,5", "-o", str(output_dir)]
    )

    assert result.exit_code == 0, result.output
    assert sorted(path.name for path in output_dir.iterdir()) == ["pages_1-2.pdf", "pages_5-5.pdf"]
    assert len(PdfReader(str(output_dir / "pages_1-2.pdf")).pages) == 2


def test_merge_command(tmp_path: Path, pdf_factory: Callable[..., bytes]) -> None:
    first = tmp_path / "a.pdf"
    second = tmp_path / "b.pdf"
    first.write_bytes(pdf_factory(pages=2))
    second.write_bytes(pdf_factory(pages=3))
    output_dir = tmp_path / "out"

    result = CliRunner().invoke(cli, ["merge", str(first), str(second), "-o", str(output_dir)])

    assert result.exit_code == 0, result.output
    assert len(PdfReader(str(output_dir / "merged.pdf")).pages) == 5


def test_rotate_command_rejects_bad_angle(sample_pdf: Path, tmp_path: Path) -> None:
    result = CliRunner().invoke(cli, ["rotate", str(sample_pdf), "-a", "45", "-o", str(tmp_path)])

    assert result.exit_code == 1
    assert "✗ Error:" in _flat(result.output)
    assert "multiple of 90" in _flat(result.output)


def test_protect_and_unlock_commands(sample_pdf: Path, tmp_path: Path) -> None:
    runner = CliRunner()
    protected_dir = tmp_path / "protected"
    unlocked_dir = tmp_path / "unlocked"

    protect = runner.invoke(
        cli, ["protect", str(sample_pdf), "--password", "secret", "-o", str(protected_dir)]
    )
    assert protect.exit_code == 0, protect.output

    wrong = runner.invoke(
        cli,
        ["unlock", str(protected_dir / "protected.pdf"), "--password", "nope", "-o", str(unlocked_dir)],
    )
    assert wrong.exit_code == 1
    assert "password might be incorrect" in _flat(wrong.output)

    unlock = runner.invoke(
        cli,
        ["unlock", str(protected_dir / "protected.pdf"), "--password", "secret", "-o", str(unlocked_dir)],
    )
    assert unlock.exit_code == 0, unlock.output
    assert PdfReader(str(unlocked_dir / "unlocked.pdf")).is_encrypted is False


def test_tables_command_without_table(tmp_path: Path, text_pdf_factory: Callable[..., bytes]) -> None:
    source = tmp_path / "prose.pdf"
    source.write_bytes(text_pdf_factory([["nothing tabular"]]))

    result = CliRunner().invoke(cli, ["tables", str(source), "-o", str(tmp_path / "out")])

    assert result.exit_code == 1
    assert "No tables detected." in _flat(result.output)


def test_redact_command(tmp_path: Path, text_pdf_factory: Callable[..., bytes]) -> None:
    source = tmp_path / "secret.pdf"
    source.write_bytes(text_pdf_factory([["secret"]]))
    output_dir = tmp_path / "out"

    result = CliRunner().invoke(
        cli, ["redact", str(source), "-r", "0,0,100,50", "-o", str(output_dir)]
    )

    assert result.exit_code == 0, result.output
    assert "secret" not in PdfReader(str(output_dir / "redacted.pdf")).pages[0].extract_text()


def test_to_pptx_command(sample_pdf: Path, tmp_path: Path) -> None:
    output_dir = tmp_path / "slides"

    result = CliRunner().invoke(cli, ["to-pptx", str(sample_pdf), "-o", str(output_dir)])

    assert result.exit_code == 0, result.output
    assert len(Presentation(str(output_dir / "converted.pptx")).slides) == 5
