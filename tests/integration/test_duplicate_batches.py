"""Integration tests for placing boxes into a scene that already has them.

Boxes carry the identity tag of the clash they mark, so a second batch over
the saved scene recognises every clash as already handled.
"""

import json
from pathlib import Path

import pytest
from typer.testing import CliRunner

from openings.cli.main import app

SCENES_PATH = Path(__file__).parent.parent / "fixtures" / "scenes"


@pytest.fixture
def runner() -> CliRunner:
    """Create a CLI runner for testing."""
    return CliRunner()


@pytest.fixture
def placed_scene(runner: CliRunner, tmp_path: Path) -> Path:
    """Scene saved after one placement batch."""
    output = tmp_path / "first.json"
    result = runner.invoke(
        app, ["place", str(SCENES_PATH / "coordination.json"), "-y", "-o", str(output)]
    )
    assert result.exit_code == 0
    return output


class TestDuplicateBatches:
    """Tests for repeated placement batches."""

    def test_second_batch_reports_every_clash(
        self, runner: CliRunner, placed_scene: Path
    ) -> None:
        result = runner.invoke(app, ["place", str(placed_scene), "-y"])

        assert result.exit_code == 0
        assert "Duplicates:          4" in result.output
        assert "DUPLICATE OPENING BOXES" in result.output
        assert "  - mep:p1|arch:w1" in result.output
        assert "4 duplicate(s)" in result.output

    def test_second_batch_still_places_boxes(
        self, runner: CliRunner, placed_scene: Path, tmp_path: Path
    ) -> None:
        output = tmp_path / "second.json"
        runner.invoke(app, ["place", str(placed_scene), "-y", "-o", str(output)])

        instances = json.loads(output.read_text(encoding="utf-8"))["document"][
            "instances"
        ]
        ids = [instance["id"] for instance in instances]
        assert len(ids) == 8
        assert len(set(ids)) == 8

    def test_stored_boxes_survive_cancelled_batch(
        self, runner: CliRunner, placed_scene: Path
    ) -> None:
        result = runner.invoke(app, ["place", str(placed_scene)], input="n\n")

        assert result.exit_code == 0
        assert "DUPLICATE" not in result.output
        data = json.loads(placed_scene.read_text(encoding="utf-8"))
        assert len(data["document"]["instances"]) == 4
