"""Tests for the multi-agent (coach/admin) commission view."""

import pytest
from datetime import date

from agentgps.transactions import (
    AgentRecord,
    CoachProcessedTransaction,
    CommissionProfile,
    Transaction,
    process_transactions_for_coach,
    process_transactions_for_user,
)

TODAY = date(2024, 6, 30)


def make_txn(txn_id, user_id, accepted, sale_price=500000, rate=2.5):
    return Transaction(
        id=txn_id,
        user_id=user_id,
        acceptance_date=accepted,
        sale_price=sale_price,
        commission_rate=rate,
        address=f"{txn_id} Oak Ave",
    )


def make_profile(user_id):
    return CommissionProfile(
        id=user_id,
        commission_split=80,
        commission_cap=16000,
        post_cap_transaction_fee=250,
        royalty_fee=6,
        royalty_fee_cap=3000,
        cap_anniversary_date=date(2024, 1, 1),
    )


@pytest.fixture
def agents():
    return [AgentRecord(id="alice", name="Alice Agent"), AgentRecord(id="bob", name="Bob Broker")]


class TestCoachView:
    """Tests for process_transactions_for_coach."""

    def test_labels_agents(self, agents):
        txns = [make_txn("a1", "alice", date(2024, 2, 1)), make_txn("b1", "bob", date(2024, 3, 1))]
        result = process_transactions_for_coach(
            txns, [make_profile("alice"), make_profile("bob")], agents, today=TODAY
        )

        assert all(isinstance(t, CoachProcessedTransaction) for t in result)
        names = {t.id: t.agent_name for t in result}
        assert names == {"a1": "Alice Agent", "b1": "Bob Broker"}

    def test_unknown_agent(self, agents):
        txns = [make_txn("x1", "stranger", date(2024, 2, 1))]
        result = process_transactions_for_coach(txns, [], agents, today=TODAY)
        assert result[0].agent_name == "Unknown Agent"

    def test_blank_name_falls_back(self):
        txns = [make_txn("x1", "nameless", date(2024, 2, 1))]
        result = process_transactions_for_coach(
            txns, [], [AgentRecord(id="nameless", name="")], today=TODAY
        )
        assert result[0].agent_name == "Unknown Agent"

    def test_custom_unknown_label(self):
        txns = [make_txn("x1", "stranger", date(2024, 2, 1))]
        result = process_transactions_for_coach(txns, [], [], today=TODAY, unknown_agent="(former agent)")
        assert result[0].agent_name == "(former agent)"

    def test_accepts_mappings(self):
        txns = [make_txn("a1", "alice", date(2024, 2, 1))]
        result = process_transactions_for_coach(
            txns, {"alice": make_profile("alice")}, {"alice": "Alice Agent"}, today=TODAY
        )
        assert result[0].agent_name == "Alice Agent"
        assert result[0].royalty_paid == pytest.approx(750)

    def test_no_transaction_lost_or_duplicated(self, agents):
        txns = [
            make_txn(f"{user}{i}", user, date(2024, 1 + i, 10))
            for user in ("alice", "bob", "carol")
            for i in range(4)
        ]
        result = process_transactions_for_coach(txns, [make_profile("alice")], agents, today=TODAY)
        assert sorted(t.id for t in result) == sorted(t.id for t in txns)

    def test_sorted_newest_first(self, agents):
        txns = [
            make_txn("a1", "alice", date(2024, 2, 1)),
            make_txn("b1", "bob", date(2024, 5, 1)),
            make_txn("a2", "alice", date(2024, 4, 1)),
            make_txn("b2", "bob", date(2023, 1, 1)),
        ]
        result = process_transactions_for_coach(txns, [], agents, today=TODAY)
        assert [t.id for t in result] == ["b1", "a2", "a1", "b2"]

    def test_missing_profile_only_affects_that_agent(self, agents):
        txns = [make_txn("a1", "alice", date(2024, 2, 1)), make_txn("b1", "bob", date(2024, 2, 1))]
        result = {t.id: t for t in process_transactions_for_coach(
            txns, [make_profile("alice")], agents, today=TODAY
        )}

        assert result["a1"].company_dollar_paid == pytest.approx(2350)
        assert result["b1"].company_dollar_paid == 0
        assert result["b1"].net_commission == result["b1"].gci

    def test_caps_isolated_between_agents(self, agents):
        """Bob's volume never consumes Alice's caps."""
        alice = [make_txn("a1", "alice", date(2024, 3, 1)), make_txn("a2", "alice", date(2024, 4, 1))]
        bob = [make_txn(f"b{i}", "bob", date(2024, 2, 1 + i), sale_price=2000000) for i in range(5)]
        profiles = [make_profile("alice"), make_profile("bob")]

        alone = process_transactions_for_user(alice, profiles[0], today=TODAY)
        together = [
            t for t in process_transactions_for_coach(alice + bob, profiles, agents, today=TODAY)
            if t.user_id == "alice"
        ]

        assert [t.company_dollar_paid for t in together] == [t.company_dollar_paid for t in alone]
        assert [t.royalty_paid for t in together] == [t.royalty_paid for t in alone]

    def test_empty(self, agents):
        assert process_transactions_for_coach([], [], agents, today=TODAY) == []
