# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.

"""Unit tests for cli.py."""

import json
from pathlib import Path

import pytest
from click.testing import CliRunner
from conftest import (
    blank_template,
    build_form_template,
    open_pdf,
    png_bytes,
    text_widgets,
)

from certrender import __version__
from certrender.cli import (
    EXIT_FILE_NOT_FOUND,
    EXIT_GENERAL_ERROR,
    EXIT_RENDER_FAILED,
    EXIT_SUCCESS,
    load_job,
    main,
)


@pytest.fixture
def runner() -> CliRunner:
    """CLI Test Runner."""
    return CliRunner()


@pytest.fixture
def template_dir(tmp_dir: Path) -> Path:
    """Template directory holding a widget-free CP12 template."""
    path = tmp_dir / "templates"
    path.mkdir()
    (path / "cp12.pdf").write_bytes(blank_template())
    return path


def write_job(path: Path, **overrides) -> Path:
    job = {
        "issued_at": "2024-05-01T09:30:00",
        "field_map": {"landlord_name": "Jane Doe"},
        "appliances": [{"location": "Kitchen"}],
    }
    job.update(overrides)
    path.write_text(json.dumps(job), encoding="utf-8")
    return path


class TestCliHelp:
    """Tests for --help option."""

    def test_cli_help(self, runner: CliRunner) -> None:
        """--help lists the commands and global options."""
        result = runner.invoke(main, ["--help"])

        assert result.exit_code == 0
        assert "render" in result.output
        assert "fields" in result.output
        assert "kinds" in result.output
        assert "--quiet" in result.output
        assert "--verbose" in result.output

    def test_render_help(self, runner: CliRunner) -> None:
        result = runner.invoke(main, ["render", "--help"])

        assert result.exit_code == 0
        assert "--preview" in result.output
        assert "--template-dir" in result.output
        assert "--force" in result.output


class TestCliVersion:
    """Tests for --version option."""

    def test_cli_version(self, runner: CliRunner) -> None:
        """--version returns exit code 0 and shows version."""
        result = runner.invoke(main, ["--version"])

        assert result.exit_code == 0
        assert __version__ in result.output


class TestCliKinds:
    """Tests for the kinds command."""

    def test_lists_every_kind(self, runner: CliRunner) -> None:
        result = runner.invoke(main, ["kinds"])

        assert result.exit_code == 0
        assert "cp12\tGas Safety Record (CP12)\tcp12.pdf" in result.output
        assert "boiler_service\tBoiler service record\tflow layout" in result.output
        assert "job_sheet\tJob sheet\tdrawn" in result.output


class TestCliRender:
    """Tests for the render command."""

    def test_render_single_job(
        self, runner: CliRunner, template_dir: Path, tmp_dir: Path
    ) -> None:
        """Successful render with exit code 0."""
        job = write_job(tmp_dir / "job.json")
        output_path = tmp_dir / "out.pdf"

        result = runner.invoke(
            main,
            [
                "render",
                "cp12",
                str(job),
                str(output_path),
                "--template-dir",
                str(template_dir),
            ],
        )

        assert result.exit_code == EXIT_SUCCESS
        assert output_path.read_bytes().startswith(b"%PDF")
        assert "Rendered" in result.output

    def test_render_into_directory_uses_filename(
        self, runner: CliRunner, template_dir: Path, tmp_dir: Path
    ) -> None:
        job = write_job(tmp_dir / "job.json", record_id="abc")
        out_dir = tmp_dir / "out"
        out_dir.mkdir()

        result = runner.invoke(
            main,
            ["render", "cp12", str(job), str(out_dir)]
            + ["--template-dir", str(template_dir)],
        )

        assert result.exit_code == EXIT_SUCCESS
        assert (out_dir / "cp12-abc.pdf").exists()

    def test_existing_output_needs_force(
        self, runner: CliRunner, template_dir: Path, tmp_dir: Path
    ) -> None:
        job = write_job(tmp_dir / "job.json")
        output_path = tmp_dir / "out.pdf"
        output_path.write_bytes(b"old")
        args = ["render", "cp12", str(job), str(output_path)]
        args += ["--template-dir", str(template_dir)]

        refused = runner.invoke(main, args)
        forced = runner.invoke(main, args + ["--force"])

        assert refused.exit_code == EXIT_GENERAL_ERROR
        assert "already exists" in refused.output
        assert forced.exit_code == EXIT_SUCCESS
        assert output_path.read_bytes().startswith(b"%PDF")

    def test_unknown_kind(self, runner: CliRunner, tmp_dir: Path) -> None:
        job = write_job(tmp_dir / "job.json")

        result = runner.invoke(main, ["render", "cp13", str(job)])

        assert result.exit_code == EXIT_GENERAL_ERROR
        assert "Unknown document kind" in result.output

    def test_missing_template(self, runner: CliRunner, tmp_dir: Path) -> None:
        job = write_job(tmp_dir / "job.json")

        result = runner.invoke(
            main,
            [
                "render",
                "cp12",
                str(job),
                str(tmp_dir / "out.pdf"),
                "--template-dir",
                str(tmp_dir / "nowhere"),
            ],
        )

        assert result.exit_code == EXIT_FILE_NOT_FOUND
        assert "Template not found" in result.output

    def test_invalid_job(
        self, runner: CliRunner, template_dir: Path, tmp_dir: Path
    ) -> None:
        job = tmp_dir / "job.json"
        job.write_text("{not json", encoding="utf-8")

        result = runner.invoke(
            main,
            ["render", "cp12", str(job), "--template-dir", str(template_dir)],
        )

        assert result.exit_code == EXIT_RENDER_FAILED
        assert "invalid JSON" in result.output

    def test_render_directory(
        self, runner: CliRunner, template_dir: Path, tmp_dir: Path
    ) -> None:
        """Every job in the directory is rendered; a bad one is counted."""
        jobs = tmp_dir / "jobs"
        jobs.mkdir()
        write_job(jobs / "a.json")
        write_job(jobs / "b.json")
        (jobs / "c.json").write_text("[]", encoding="utf-8")
        out_dir = tmp_dir / "out"

        result = runner.invoke(
            main,
            ["render", "cp12", str(jobs), str(out_dir)]
            + ["--template-dir", str(template_dir)],
        )

        assert result.exit_code == EXIT_RENDER_FAILED
        assert (out_dir / "cp12-a.pdf").exists()
        assert (out_dir / "cp12-b.pdf").exists()
        assert "2 successful, 1 failed" in result.output

    def test_job_sheet_with_qr(self, runner: CliRunner, tmp_dir: Path) -> None:
        job = write_job(tmp_dir / "job.json", field_map={"customer_name": "Jane"})
        qr = tmp_dir / "qr.png"
        qr.write_bytes(png_bytes(size=(20, 20)))
        output_path = tmp_dir / "sheet.pdf"

        result = runner.invoke(
            main,
            ["render", "job_sheet", str(job), str(output_path), "--qr-image", str(qr)],
        )

        assert result.exit_code == EXIT_SUCCESS
        with open_pdf(output_path.read_bytes()) as pdf:
            assert "/CRIm0" in pdf.pages[0].Resources.XObject


class TestCliFields:
    """Tests for the fields command."""

    def test_lists_fields(self, runner: CliRunner, tmp_dir: Path) -> None:
        template = tmp_dir / "form.pdf"
        template.write_bytes(build_form_template(text_widgets(["Text_2", "Text_1"])))

        result = runner.invoke(main, ["fields", str(template)])

        assert result.exit_code == 0
        lines = result.output.strip().splitlines()
        assert lines[0].startswith("Text_1\ttext\tpage 1")
        assert "[40, 480, 200 x 16]" in lines[0]
        assert lines[1].startswith("Text_2\ttext")

    def test_no_fields(self, runner: CliRunner, tmp_dir: Path) -> None:
        template = tmp_dir / "plain.pdf"
        template.write_bytes(blank_template())

        result = runner.invoke(main, ["fields", str(template)])

        assert result.exit_code == 0
        assert "no form fields" in result.output


class TestLoadJob:
    """Tests for load_job()."""

    def test_record_id_defaults_to_stem(self, tmp_dir: Path) -> None:
        request = load_job(write_job(tmp_dir / "8c1d.json"))

        assert request.record_id == "8c1d"
        assert request.field_map == {"landlord_name": "Jane Doe"}
        assert request.appliances == ({"location": "Kitchen"},)

    def test_utc_suffix(self, tmp_dir: Path) -> None:
        request = load_job(write_job(tmp_dir / "j.json", issued_at="2024-05-01T09:30Z"))

        assert request.issued_at.tzinfo is not None

    @pytest.mark.parametrize("issued_at", [None, "", "yesterday"])
    def test_bad_issued_at(self, tmp_dir: Path, issued_at) -> None:
        with pytest.raises(ValueError, match="issued_at"):
            load_job(write_job(tmp_dir / "j.json", issued_at=issued_at))
