import asyncio
import logging
from collections import deque
from typing import Any, Awaitable, Callable, Deque, Optional

from .errors import InvalidStateError


class PendingCommand:
    def __init__(
        self,
        command: Callable[[], Awaitable[Any]],
        name: Optional[str],
        future: asyncio.Future
    ):
        self.command = command
        self.name = name
        self.future = future


class CommandQueue:
    """Runs pushed commands one at a time in push order.

    Every command is a zero-argument callable returning an awaitable. The
    future returned by push() settles with the outcome of that command once
    it has run, or with InvalidStateError if the queue was closed before it
    started.
    """
    def __init__(self, logger: Optional[logging.Logger] = None, loop=None):
        self._logger = logger or logging.getLogger(__name__)
        self._loop = loop
        # Closed flag.
        self._closed: bool = False
        # Commands not started yet.
        self._commands: Deque[PendingCommand] = deque()
        # Command being executed.
        self._current: Optional[PendingCommand] = None
        # Runner task, only alive while there are commands.
        self._runner: Optional[asyncio.Task] = None

    # Whether the queue is closed.
    @property
    def closed(self) -> bool:
        return self._closed

    # Number of commands not settled yet.
    @property
    def size(self) -> int:
        return len(self._commands) + (1 if self._current else 0)

    def _getLoop(self):
        if self._loop is None:
            self._loop = asyncio.get_running_loop()
        return self._loop

    def push(self, command: Callable[[], Awaitable[Any]], name: Optional[str] = None) -> asyncio.Future:
        if not callable(command):
            self._logger.error(f'push() | given command is not callable: {command!r}')
            raise TypeError('given command is not callable')

        future = self._getLoop().create_future()

        if self._closed:
            future.set_exception(InvalidStateError('closed'))
            return future

        self._commands.append(PendingCommand(command, name, future))

        if self._runner is None:
            self._runner = self._getLoop().create_task(self._run())

        return future

    def close(self):
        if self._closed:
            return

        self._closed = True

        while self._commands:
            pendingCommand = self._commands.popleft()
            if not pendingCommand.future.done():
                pendingCommand.future.set_exception(InvalidStateError('closed'))

    async def _run(self):
        try:
            while self._commands and not self._closed:
                self._current = self._commands.popleft()
                try:
                    await self._execute(self._current)
                finally:
                    self._current = None
        finally:
            self._runner = None

    async def _execute(self, pendingCommand: PendingCommand):
        future = pendingCommand.future
        try:
            result = await pendingCommand.command()
        except Exception as e:
            self._logger.error(f'CommandQueue _execute() | command {pendingCommand.name or ""} failed: {e!r}')
            if not future.done():
                future.set_exception(e)
        else:
            if not future.done():
                future.set_result(result)
