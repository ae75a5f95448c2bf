"""Tests for the agentgps command line."""

import csv
import json
import pytest
import tempfile
from pathlib import Path

from click.testing import CliRunner

from agentgps.cli.main import cli


@pytest.fixture
def temp_data_dir():
    """Create temporary data directory with a small brokerage snapshot."""
    with tempfile.TemporaryDirectory() as tmpdir:
        root = Path(tmpdir)
        (root / "transactions.json").write_text(json.dumps({"transactions": [
            {"id": "a1", "userId": "alice", "acceptanceDate": "2024-02-01",
             "salePrice": 500000, "commissionRate": 2.5, "address": "12 Maple Dr"},
            {"id": "a2", "userId": "alice", "acceptanceDate": "2024-03-01",
             "salePrice": 600000, "commissionRate": 2.5, "address": "9 Birch Rd"},
            {"id": "b1", "userId": "bob", "acceptanceDate": "2024-04-01",
             "salePrice": 400000, "commissionRate": 2.5, "address": "77 Cedar Ln"},
        ]}))
        (root / "profiles.json").write_text(json.dumps([{
            "id": "alice", "commissionSplit": 80, "commissionCap": 16000,
            "postCapTransactionFee": 250, "royaltyFee": 6, "royaltyFeeCap": 3000,
            "capAnniversaryDate": "2024-01-01",
        }]))
        (root / "agents.json").write_text(json.dumps([
            {"id": "alice", "name": "Alice Agent"},
            {"id": "bob", "name": "Bob Broker"},
        ]))
        yield root


@pytest.fixture
def runner():
    return CliRunner()


class TestAgentCommand:
    """Tests for `agentgps agent`."""

    def test_agent_with_profile(self, runner, temp_data_dir):
        result = runner.invoke(cli, [
            "agent",
            "-t", str(temp_data_dir / "transactions.json"),
            "-p", str(temp_data_dir / "profiles.json"),
            "-u", "alice",
            "--as-of", "2024-06-30",
        ])
        assert result.exit_code == 0, result.output
        assert "Totals" in result.output
        assert "$20,680.00" in result.output  # 9400 + 11280
        assert "Cap Progress" in result.output

    def test_agent_without_profile(self, runner, temp_data_dir):
        result = runner.invoke(cli, [
            "agent", "-t", str(temp_data_dir / "transactions.json"), "-u", "bob",
        ])
        assert result.exit_code == 0, result.output
        assert "fully net" in result.output

    def test_agent_export(self, runner, temp_data_dir):
        output = temp_data_dir / "alice.csv"
        result = runner.invoke(cli, [
            "agent",
            "-t", str(temp_data_dir / "transactions.json"),
            "-p", str(temp_data_dir / "profiles.json"),
            "-u", "alice",
            "--as-of", "2024-06-30",
            "--export", str(output),
        ])
        assert result.exit_code == 0, result.output
        with open(output, newline="", encoding="utf-8") as f:
            rows = list(csv.DictReader(f))
        assert [r["id"] for r in rows] == ["a2", "a1"]

    def test_several_agents_need_user(self, runner, temp_data_dir):
        result = runner.invoke(cli, [
            "agent",
            "-t", str(temp_data_dir / "transactions.json"),
            "-p", str(temp_data_dir / "profiles.json"),
        ])
        assert result.exit_code == 1
        assert "Error" in result.output
        assert "--user" in result.output

    def test_single_agent_picks_matching_profile(self, runner, temp_data_dir):
        """Without --user the profile is the one whose id matches the transactions."""
        (temp_data_dir / "alice.json").write_text(json.dumps([
            {"id": "a1", "userId": "alice", "acceptanceDate": "2024-02-01",
             "salePrice": 500000, "commissionRate": 2.5},
            {"id": "a2", "userId": "alice", "acceptanceDate": "2024-03-01",
             "salePrice": 600000, "commissionRate": 2.5},
        ]))
        (temp_data_dir / "both_profiles.json").write_text(json.dumps([
            {"id": "bob", "commissionSplit": 50, "commissionCap": 20000,
             "postCapTransactionFee": 500, "royaltyFee": 6, "royaltyFeeCap": 3000,
             "capAnniversaryDate": "2024-01-01"},
            {"id": "alice", "commissionSplit": 80, "commissionCap": 16000,
             "postCapTransactionFee": 250, "royaltyFee": 6, "royaltyFeeCap": 3000,
             "capAnniversaryDate": "2024-01-01"},
        ]))
        result = runner.invoke(cli, [
            "agent",
            "-t", str(temp_data_dir / "alice.json"),
            "-p", str(temp_data_dir / "both_profiles.json"),
            "--as-of", "2024-06-30",
        ])
        assert result.exit_code == 0, result.output
        assert "$20,680.00" in result.output
        assert "$16,000.00" in result.output

    def test_missing_file(self, runner, temp_data_dir):
        result = runner.invoke(cli, ["agent", "-t", str(temp_data_dir / "missing.json")])
        assert result.exit_code == 1
        assert "Error" in result.output


class TestCoachCommand:
    """Tests for `agentgps coach` and `agentgps export`."""

    def args(self, temp_data_dir):
        return [
            "-t", str(temp_data_dir / "transactions.json"),
            "-p", str(temp_data_dir / "profiles.json"),
            "-a", str(temp_data_dir / "agents.json"),
            "--as-of", "2024-06-30",
        ]

    def test_coach_totals(self, runner, temp_data_dir):
        result = runner.invoke(cli, ["coach", *self.args(temp_data_dir)])
        assert result.exit_code == 0, result.output
        assert "Transactions: 3" in result.output
        assert "$37,500.00" in result.output

    def test_coach_filter(self, runner, temp_data_dir):
        result = runner.invoke(cli, ["coach", *self.args(temp_data_dir), "--filter", "bob"])
        assert result.exit_code == 0, result.output
        assert "Transactions: 1" in result.output

    def test_coach_no_matches(self, runner, temp_data_dir):
        result = runner.invoke(cli, ["coach", *self.args(temp_data_dir), "--filter", "nobody"])
        assert result.exit_code == 0
        assert "No transactions found" in result.output

    def test_export_json(self, runner, temp_data_dir):
        output = temp_data_dir / "all.json"
        result = runner.invoke(cli, [
            "export", *self.args(temp_data_dir), "-o", str(output), "--format", "json",
        ])
        assert result.exit_code == 0, result.output

        data = json.loads(output.read_text())
        assert data["total"] == 3
        assert {t["agent_name"] for t in data["transactions"]} == {"Alice Agent", "Bob Broker"}
