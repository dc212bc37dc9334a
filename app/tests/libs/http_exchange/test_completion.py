import pytest

from libs.http_exchange.completion import Completion
from libs.http_exchange.exceptions import TransactionAborted
from libs.http_exchange.models import Transaction
from libs.http_exchange.signals import Cause, Phase, TerminalSignal
from libs.http_exchange.timeout import TimeoutGuard


def new_completion() -> Completion:
    transaction = Transaction(method="GET", uri="http://example.com/", info={"start_time": 0.0, "stop_time": 0.0})
    return Completion(transaction, TimeoutGuard(1000))


class TestCompletion:
    @pytest.mark.asyncio
    async def test_finish_runs_once(self):
        completion = new_completion()
        completion.append(b"partial")

        first = await completion.finish(TerminalSignal(Cause.ABORTED, Phase.RESPONSE))
        completion.append(b" more")
        second = await completion.finish(TerminalSignal.end())

        assert second is first
        assert isinstance(first.error, TransactionAborted)
        assert first.response_body == b"partial"

    @pytest.mark.asyncio
    async def test_releases_owned_resources_most_recent_first(self):
        closed = []

        def closer(name):
            async def close():
                closed.append(name)

            return close

        completion = new_completion()
        completion.own(closer("transport"))
        completion.own(closer("response"))

        await completion.finish(TerminalSignal.end())
        await completion.release()

        assert closed == ["response", "transport"]

    @pytest.mark.asyncio
    async def test_cleanup_failure_is_ignored(self):
        async def broken():
            raise OSError("socket already gone")

        completion = new_completion()
        completion.own(broken)

        tran = await completion.finish(TerminalSignal.end())

        assert tran.error is None
        assert tran.info["stop_time"] >= tran.info["start_time"]
