import itertools

import pytest

from ubrary import states
from ubrary.errors import InvalidTransition


ALLOWED = {
    ("pending", "under_review"),
    ("under_review", "approved"),
    ("under_review", "published"),
    ("under_review", "needs_revision"),
    ("under_review", "rejected"),
    ("needs_revision", "pending"),
    ("needs_revision", "under_review"),
    ("approved", "curation"),
    ("curation", "ready_for_publication"),
    ("ready_for_publication", "published"),
    # universal reject override from every non-terminal status
    ("pending", "rejected"),
    ("needs_revision", "rejected"),
    ("approved", "rejected"),
    ("curation", "rejected"),
    ("ready_for_publication", "rejected"),
}


def test_edge_table_matches_graph_exactly():
    for from_status, to_status in itertools.product(states.STATUSES, repeat=2):
        assert states.validate_edge(from_status, to_status) == ((from_status, to_status) in ALLOWED)


def test_terminal_statuses_have_no_outgoing_edges():
    for terminal in states.TERMINAL_STATUSES:
        assert states.allowed_targets(terminal) == frozenset()


def test_unknown_statuses_are_rejected():
    assert not states.validate_edge("draft", "pending")
    assert not states.validate_edge("pending", "archived")
    with pytest.raises(InvalidTransition):
        states.ensure_edge("pending", "archived")


def test_override_edges_are_only_the_extra_rejections():
    assert states.is_override_edge("approved", "rejected")
    assert not states.is_override_edge("under_review", "rejected")
    assert not states.is_override_edge("published", "rejected")


def test_workflow_position_follows_listing_order():
    assert states.workflow_position("pending") == 1
    assert states.workflow_position("rejected") == 8
    assert states.workflow_position("unknown") == 0


def test_replay_rebuilds_long_path():
    history = [
        (None, "under_review"),
        ("under_review", "needs_revision"),
        ("needs_revision", "pending"),
        ("pending", "under_review"),
        ("under_review", "approved"),
        ("approved", "curation"),
        ("curation", "ready_for_publication"),
        ("ready_for_publication", "published"),
    ]
    assert states.replay(history) == "published"


def test_replay_of_empty_history_is_initial_status():
    assert states.replay([]) == states.INITIAL_STATUS


def test_replay_rejects_broken_chain():
    with pytest.raises(InvalidTransition):
        states.replay([("pending", "under_review"), ("approved", "curation")])


def test_replay_rejects_edge_outside_graph():
    with pytest.raises(InvalidTransition):
        states.replay([("pending", "published")])
