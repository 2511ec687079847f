"""
Tests for threshold_wallet.events.
"""
from __future__ import annotations

from unittest.mock import Mock

from threshold_wallet.events import EventLog, Notification, NotificationType

from conftest import BOB


class TestNotificationType:
    """Tests for NotificationType enum."""

    def test_type_values(self):
        """Should have correct notification values."""
        assert NotificationType.SUBMISSION.value == "submission"
        assert NotificationType.APPROVE.value == "approve"
        assert NotificationType.EXECUTE.value == "execute"
        assert NotificationType.EXECUTE_ERROR.value == "execute_error"
        assert NotificationType.DEPOSIT.value == "deposit"


class TestNotification:
    """Tests for Notification."""

    def test_to_dict_omits_absent_fields(self):
        """Should only serialize the fields an event carries."""
        n = Notification(NotificationType.APPROVE, transaction_id=0, approver=BOB, sequence=3)

        data = n.to_dict()

        assert data["event_type"] == "approve"
        assert data["transaction_id"] == 0
        assert data["approver"] == BOB
        assert data["sequence"] == 3
        assert "reason" not in data
        assert "value" not in data


class TestEventLog:
    """Tests for EventLog."""

    def test_keeps_emission_order(self):
        """Should record notifications with increasing sequence numbers."""
        log = EventLog()

        log.emit(NotificationType.SUBMISSION, transaction_id=0)
        log.emit(NotificationType.APPROVE, transaction_id=0, approver=BOB)
        log.emit(NotificationType.SUBMISSION, transaction_id=1)

        assert [n.sequence for n in log.notifications] == [0, 1, 2]
        assert [n.transaction_id for n in log.for_transaction(0)] == [0, 0]
        assert len(log.of_type(NotificationType.SUBMISSION)) == 2

    def test_pattern_subscription(self):
        """Should deliver only matching notifications."""
        log = EventLog()
        handler = Mock(__name__="handler")
        log.subscribe("execute*", handler)

        log.emit(NotificationType.APPROVE, transaction_id=0, approver=BOB)
        log.emit(NotificationType.EXECUTE, transaction_id=0)
        log.emit(NotificationType.EXECUTE_ERROR, transaction_id=1, reason="x")

        delivered = [call.args[0].event_type for call in handler.call_args_list]
        assert delivered == [NotificationType.EXECUTE, NotificationType.EXECUTE_ERROR]

    def test_subscribe_is_idempotent(self):
        """Subscribing the same handler twice should deliver once."""
        log = EventLog()
        handler = Mock(__name__="handler")
        log.subscribe("*", handler)
        log.subscribe("*", handler)

        log.emit(NotificationType.SUBMISSION, transaction_id=0)

        assert handler.call_count == 1

    def test_unsubscribe(self):
        """Should stop delivery after unsubscribing."""
        log = EventLog()
        handler = Mock(__name__="handler")
        log.subscribe("*", handler)
        log.unsubscribe("*", handler)
        log.unsubscribe("*", handler)

        log.emit(NotificationType.SUBMISSION, transaction_id=0)

        handler.assert_not_called()

    def test_failing_handler_isolated(self):
        """A failing handler should not stop other handlers or the emitter."""
        log = EventLog()
        broken = Mock(__name__="broken", side_effect=RuntimeError("boom"))
        healthy = Mock(__name__="healthy")
        log.subscribe("*", broken)
        log.subscribe("submission", healthy)

        notification = log.emit(NotificationType.SUBMISSION, transaction_id=0)

        healthy.assert_called_once_with(notification)
        assert len(log) == 1

    def test_handlers_see_wallet_notifications(self, wallet, events):
        """Subscribers should observe the wallet's transitions in order."""
        seen = []
        events.subscribe("*", lambda n: seen.append(n.event_type))

        tx_id = wallet.submit(BOB, "0xdead000000000000000000000000000000000001", 1)
        wallet.approve("0xa11ce00000000000000000000000000000000001", tx_id)

        assert seen == [
            NotificationType.SUBMISSION,
            NotificationType.APPROVE,
            NotificationType.APPROVE,
            NotificationType.EXECUTE,
        ]

    def test_deferred_holds_delivery_until_outermost_exit(self):
        """Should record immediately but deliver only after the outer block."""
        log = EventLog()
        handler = Mock(__name__="handler")
        log.subscribe("*", handler)

        with log.deferred():
            with log.deferred():
                log.emit(NotificationType.SUBMISSION, transaction_id=0)
            log.emit(NotificationType.APPROVE, transaction_id=0, approver=BOB)

            assert len(log) == 2
            handler.assert_not_called()

        delivered = [c.args[0].event_type for c in handler.call_args_list]
        assert delivered == [NotificationType.SUBMISSION, NotificationType.APPROVE]

    def test_notifications_emitted_by_handlers_follow_in_order(self):
        """A handler that emits should not overtake queued notifications."""
        log = EventLog()
        delivered = []

        def on_submission(notification):
            log.emit(NotificationType.EXECUTE, transaction_id=0)

        log.subscribe("submission", on_submission)
        log.subscribe("*", lambda n: delivered.append(n.event_type))

        with log.deferred():
            log.emit(NotificationType.SUBMISSION, transaction_id=0)
            log.emit(NotificationType.APPROVE, transaction_id=0, approver=BOB)

        assert delivered == [
            NotificationType.SUBMISSION,
            NotificationType.APPROVE,
            NotificationType.EXECUTE,
        ]
        assert [n.sequence for n in log.notifications] == [0, 1, 2]
