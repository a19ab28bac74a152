import json

from click.testing import CliRunner

from main import cli

from conftest import LOGIN_FEATURE, scored_analysis


def write(tmp_path, name, content):
    path = tmp_path / name
    path.write_text(content, encoding="utf-8")
    return str(path)


class TestHeadingsCommand:
    def test_lists_headings(self, tmp_path):
        result = CliRunner().invoke(cli, ["headings", write(tmp_path, "login.feature", LOGIN_FEATURE)])

        assert result.exit_code == 0
        assert "1. Valid credentials" in result.output
        assert "2. Wrong password" in result.output


class TestCheckCommand:
    def test_current_analysis(self, tmp_path):
        feature = write(tmp_path, "login.feature", LOGIN_FEATURE)
        analysis = write(tmp_path, "analysis.json", scored_analysis(["Valid credentials", "Wrong password"]).to_json())

        result = CliRunner().invoke(cli, ["check", feature, "--analysis", analysis])

        assert result.exit_code == 0

    def test_stale_analysis_with_normalize(self, tmp_path):
        feature = write(tmp_path, "login.feature", LOGIN_FEATURE)
        analysis = write(tmp_path, "analysis.json", scored_analysis(["Valid credentials"]).to_json())

        result = CliRunner().invoke(cli, ["check", feature, "--analysis", analysis, "--normalize"])

        assert result.exit_code == 1
        payload = json.loads(result.output[result.output.index("{"):])
        assert [s["title"] for s in payload["scenarios"]] == ["Valid credentials", "Wrong password"]
        assert payload["scenarios"][1]["complexity"] == "Unknown"
