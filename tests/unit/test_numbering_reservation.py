"""Unit tests for the reservation module."""

import pytest

from superstitious.numbering.reservation import reserve_unlucky_numbers
from superstitious.schemas.config import SuperstitiousConfig
from superstitious.utils.constants import PLACEHOLDER_LABEL, PLACEHOLDER_MARKER_LABEL


@pytest.mark.asyncio
async def test_reserve_consecutive_unlucky_run(tracker, label_names_of) -> None:
    """A run of unlucky numbers right at the counter is consumed in full."""
    tracker.seed_counter(130)
    config = SuperstitiousConfig(unlucky_numbers=list(range(130, 140)), reservation_space=1)

    result = await reserve_unlucky_numbers(tracker, config)

    assert result.targets == list(range(130, 140))
    assert [placeholder.number for placeholder in result.placeholders] == list(range(130, 140))
    assert result.failed_targets == []
    assert tracker.next_assignable_number == 140
    for placeholder in result.placeholders:
        assert label_names_of(placeholder) == [PLACEHOLDER_MARKER_LABEL, PLACEHOLDER_LABEL]
        assert placeholder.title == config.placeholder.title


@pytest.mark.asyncio
async def test_reserve_nothing_when_window_is_lucky(tracker) -> None:
    """No placeholders are created when no unlucky number is in the window."""
    tracker.seed_counter(130)
    config = SuperstitiousConfig(unlucky_numbers=[7, 13, 666], reservation_space=1)

    result = await reserve_unlucky_numbers(tracker, config)

    assert result.targets == []
    assert result.placeholders == []
    assert tracker.writes == []


@pytest.mark.asyncio
async def test_reserve_fills_gap_before_target(tracker, log_events) -> None:
    """Placeholders are created for the safe numbers leading up to the target too."""
    tracker.seed_counter(5)
    config = SuperstitiousConfig(unlucky_numbers=[7], reservation_space=5)

    result = await reserve_unlucky_numbers(tracker, config)

    assert result.targets == [7]
    assert [placeholder.number for placeholder in result.placeholders] == [5, 6, 7]
    assert tracker.next_assignable_number == 8

    events = [event["event"] for event in log_events()]
    assert events.count("Created placeholder issue") == 3
    assert "Reserved unlucky numbers" in events
    assert not any(event.startswith("Would") for event in events)


@pytest.mark.asyncio
async def test_reserve_rereads_counter_under_concurrent_activity(tracker) -> None:
    """Issues opened by others between creations are accounted for."""
    tracker.seed_counter(5)
    tracker.concurrent_issues_per_create = 1
    config = SuperstitiousConfig(unlucky_numbers=[7], reservation_space=5)

    result = await reserve_unlucky_numbers(tracker, config)

    # 5 and 7 go to organic issues, 6 and 8 to placeholders.
    assert [placeholder.number for placeholder in result.placeholders] == [6, 8]
    assert tracker.next_assignable_number > 7


@pytest.mark.asyncio
async def test_reserve_leaves_counter_past_every_target(tracker) -> None:
    """After a run, the counter is past the highest target."""
    tracker.seed_counter(60)
    config = SuperstitiousConfig(unlucky_numbers=[61, 63, 66], reservation_space=10)

    result = await reserve_unlucky_numbers(tracker, config)

    assert result.targets == [61, 63, 66]
    assert tracker.next_assignable_number > max(result.targets)
    assert len(result.placeholders) == 7


@pytest.mark.asyncio
async def test_reserve_is_idempotent(tracker) -> None:
    """A second run right after the first creates nothing."""
    tracker.seed_counter(5)
    config = SuperstitiousConfig(unlucky_numbers=[7], reservation_space=5)

    await reserve_unlucky_numbers(tracker, config)
    writes_after_first_run = list(tracker.writes)
    second = await reserve_unlucky_numbers(tracker, config)

    assert second.placeholders == []
    assert tracker.writes == writes_after_first_run


@pytest.mark.asyncio
async def test_reserve_failure_only_aborts_that_target(tracker) -> None:
    """A failed creation is recorded and the remaining targets are still processed."""
    tracker.seed_counter(6)
    tracker.failing_creates = 1
    config = SuperstitiousConfig(unlucky_numbers=[7, 9], reservation_space=5)

    result = await reserve_unlucky_numbers(tracker, config)

    assert result.targets == [7, 9]
    assert result.failed_targets == [7]
    assert [placeholder.number for placeholder in result.placeholders] == [6, 7, 8, 9]
    assert tracker.next_assignable_number == 10


@pytest.mark.asyncio
async def test_reserve_dry_run_changes_nothing(tracker, log_events) -> None:
    """A dry run finds the targets but creates nothing."""
    tracker.seed_counter(130)
    config = SuperstitiousConfig(unlucky_numbers=list(range(130, 140)), reservation_space=1)

    result = await reserve_unlucky_numbers(tracker, config, dry_run=True)

    assert result.targets == list(range(130, 140))
    assert result.placeholders == []
    assert result.failed_targets == []
    assert tracker.writes == []
    assert tracker.next_assignable_number == 130

    events = [event["event"] for event in log_events()]
    assert "Would have reserved unlucky numbers" in events
    assert not any(event.startswith(("Created", "Closed", "Reserved")) for event in events)


@pytest.mark.asyncio
async def test_reserve_dry_run_counts_each_placeholder_once(tracker, log_events) -> None:
    """The placeholders reported for each target add up to what a real run would create."""
    tracker.seed_counter(6)
    config = SuperstitiousConfig(unlucky_numbers=[7, 9], reservation_space=5)

    await reserve_unlucky_numbers(tracker, config, dry_run=True)

    planned = [
        (event["target"], event["placeholder_count"])
        for event in log_events()
        if event["event"] == "Would create placeholder issues until the target number is consumed"
    ]
    assert planned == [(7, 2), (9, 2)]
    assert tracker.writes == []


@pytest.mark.asyncio
async def test_reserve_zero_space_reserves_nothing(tracker) -> None:
    """A reservation space of zero never creates placeholders."""
    tracker.seed_counter(7)
    config = SuperstitiousConfig(unlucky_numbers=[7], reservation_space=0)

    result = await reserve_unlucky_numbers(tracker, config)

    assert result.targets == []
    assert tracker.writes == []
