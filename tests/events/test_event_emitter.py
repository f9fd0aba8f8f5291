"""Tests for EventEmitter class."""

import pytest

from fetchq.events import EventEmitter, NullEmitter, Subscription


@pytest.fixture
def test_emitter(mock_logger):
    return EventEmitter(logger=mock_logger)


class TestEventEmitterSubscription:
    """Test event subscription and unsubscription."""

    def test_on_registers_handler(self, test_emitter):
        def handler(event):
            pass

        sub = test_emitter.on("task.settled", handler)

        assert isinstance(sub, Subscription)
        assert handler in test_emitter._handlers["task.settled"]

    def test_off_removes_handler(self, test_emitter):
        def handler(event):
            pass

        test_emitter.on("task.settled", handler)
        test_emitter.off("task.settled", handler)

        assert handler not in test_emitter._handlers.get("task.settled", [])

    def test_off_handles_non_existent_handler_gracefully(self, test_emitter):
        def handler(event):
            pass

        test_emitter.off("task.settled", handler)

        warning_msg = f"Handler {handler} not found for event task.settled"
        test_emitter._logger.warning.assert_called_once_with(warning_msg)

    @pytest.mark.asyncio
    async def test_subscription_unsubscribe_stops_delivery(self, test_emitter):
        received = []
        sub = test_emitter.on("task.settled", received.append)

        sub.unsubscribe()
        await test_emitter.emit("task.settled", "event")

        assert received == []
        assert sub.is_active is False


class TestEventEmitterDispatch:
    """Test handler execution."""

    @pytest.mark.asyncio
    async def test_sync_handler_receives_event(self, test_emitter):
        received = []
        test_emitter.on("task.started", received.append)

        await test_emitter.emit("task.started", "payload")

        assert received == ["payload"]

    @pytest.mark.asyncio
    async def test_async_handler_is_awaited(self, test_emitter):
        received = []

        async def handler(event):
            received.append(event)

        test_emitter.on("task.started", handler)
        await test_emitter.emit("task.started", "payload")

        assert received == ["payload"]

    @pytest.mark.asyncio
    async def test_wildcard_receives_every_event(self, test_emitter):
        received = []
        test_emitter.on("*", received.append)

        await test_emitter.emit("task.started", 1)
        await test_emitter.emit("task.settled", 2)

        assert received == [1, 2]

    @pytest.mark.asyncio
    async def test_handlers_only_receive_their_type(self, test_emitter):
        received = []
        test_emitter.on("task.started", received.append)

        await test_emitter.emit("task.settled", "other")

        assert received == []

    @pytest.mark.asyncio
    async def test_sync_handler_error_is_logged_and_isolated(self, test_emitter):
        received = []

        def broken(event):
            raise RuntimeError("boom")

        test_emitter.on("task.started", broken)
        test_emitter.on("task.started", received.append)

        await test_emitter.emit("task.started", "payload")

        assert received == ["payload"]
        test_emitter._logger.exception.assert_called_once()

    @pytest.mark.asyncio
    async def test_async_handler_error_is_logged(self, test_emitter):
        async def broken(event):
            raise RuntimeError("boom")

        test_emitter.on("task.started", broken)
        await test_emitter.emit("task.started", "payload")

        test_emitter._logger.opt.assert_called_once()


class TestNullEmitter:
    """Test the no-op emitter."""

    @pytest.mark.asyncio
    async def test_does_nothing(self):
        emitter = NullEmitter()
        received = []
        sub = emitter.on("task.started", received.append)

        await emitter.emit("task.started", "payload")
        sub.unsubscribe()

        assert received == []
