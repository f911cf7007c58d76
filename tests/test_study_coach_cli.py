# ABOUTME: Verifies the study coach CLI exposes record, recommend, and insights commands.
# ABOUTME: Drives the Typer app against the sample catalog with a temporary profile dir.

import json
from pathlib import Path

from typer.testing import CliRunner

from scripts import study_coach

ROOT = Path(__file__).resolve().parents[1]
CATALOG = ROOT / "data" / "sample_catalog.csv"
CONFIG = ROOT / "configs" / "recommender.yaml"

runner = CliRunner()


def _invoke(*args):
    return runner.invoke(study_coach.app, list(args))


def _common(profile_dir):
    return ["--catalog-path", str(CATALOG), "--config", str(CONFIG), "--profile-dir", str(profile_dir)]


def test_cli_has_all_commands():
    app = study_coach.app
    command_names = {cmd.name or cmd.callback.__name__ for cmd in app.registered_commands}
    assert {"record", "recommend", "insights"} <= command_names


def test_record_then_recommend_and_insights(tmp_path):
    result = _invoke("record", "--user-id", "u1", "--item-id", "1", "--kind", "complete", *_common(tmp_path))
    assert result.exit_code == 0, result.output
    assert "Recorded complete" in result.output

    saved = json.loads((tmp_path / "u1" / "userLearningHistory.json").read_text())
    assert saved["history"][0]["itemId"] == "1"
    assert saved["subjectWeights"] == {"Chemistry": 3.0}

    result = _invoke("recommend", "--user-id", "u1", "--count", "3", *_common(tmp_path))
    assert result.exit_code == 0, result.output
    assert "Recommended for u1" in result.output

    result = _invoke("insights", "--user-id", "u1", *_common(tmp_path))
    assert result.exit_code == 0, result.output
    assert "Chemistry" in result.output


def test_record_unknown_item_reports_nothing_recorded(tmp_path):
    result = _invoke("record", "--user-id", "u2", "--item-id", "999", "--kind", "view", *_common(tmp_path))
    assert result.exit_code == 0
    assert "nothing recorded" in result.output
    assert not (tmp_path / "u2" / "userLearningHistory.json").exists()


def test_record_rejects_unknown_kind(tmp_path):
    result = _invoke("record", "--user-id", "u3", "--item-id", "1", "--kind", "like", *_common(tmp_path))
    assert result.exit_code != 0


def test_missing_catalog_exits_with_error(tmp_path):
    result = _invoke(
        "recommend",
        "--user-id",
        "u1",
        "--catalog-path",
        str(tmp_path / "absent.csv"),
        "--profile-dir",
        str(tmp_path),
    )
    assert result.exit_code == 1


def test_insights_humanizes_first_hyphen_only(tmp_path):
    catalog = tmp_path / "catalog.csv"
    catalog.write_text(
        "item_id,title,subject,difficulty,tags,download_count,year,has_ai_tutor\n"
        "x1,Chemistry Model Paper,Chemistry,hard,physical-chemistry-basics,10,2024,false\n"
    )
    args = ["--catalog-path", str(catalog), "--config", str(CONFIG), "--profile-dir", str(tmp_path / "profiles")]

    result = _invoke("record", "--user-id", "u4", "--item-id", "x1", "--kind", "view", *args)
    assert result.exit_code == 0, result.output

    result = _invoke("insights", "--user-id", "u4", *args)
    assert result.exit_code == 0, result.output
    assert "physical chemistry-basics" in result.output
