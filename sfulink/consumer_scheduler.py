import asyncio
import logging
from typing import Any, Callable, Dict, List, Optional

from .command_queue import CommandQueue
from .errors import InvalidStateError
from .handlers.handler_interface import HandlerInterface
from .models.consumer import ConsumerOptions
from .models.handler_interface import HandlerReceiveOptions, HandlerReceiveResult
from .ortc import generateProbatorRtpParameters, RTP_PROBATOR_MID


class ConsumerCreationTask:
    def __init__(self, options: ConsumerOptions, future: asyncio.Future):
        self.options = options
        self.future = future


class ConsumerScheduler:
    """Batches Consumer creation, pause and resume against a handler.

    Consumer creations requested while a batch is waiting in the command
    queue are merged into it, so the handler gets a single receive() call
    for all of them. Pause and resume intents are collected per Consumer id
    until the next loop iteration; the last intent for a given id wins.
    """
    def __init__(
        self,
        queue: CommandQueue,
        handler: HandlerInterface,
        consumerFactory: Callable[[ConsumerOptions, HandlerReceiveResult], Any],
        logger: Optional[logging.Logger] = None,
        loop=None
    ):
        self._queue = queue
        self._handler = handler
        self._consumerFactory = consumerFactory
        self._logger = logger or logging.getLogger(__name__)
        self._loop = loop
        # Closed flag.
        self._closed: bool = False
        # Whether the Consumer for RTP probation has been created.
        self._probatorConsumerCreated: bool = False
        # Consumer creations waiting for the next batch.
        self._pendingConsumerTasks: List[ConsumerCreationTask] = []
        # Whether a creation batch is queued or running.
        self._consumerCreationInProgress: bool = False
        # Local ids of Consumers to pause, indexed by Consumer id.
        self._pendingPauseConsumers: Dict[str, str] = {}
        # Whether a pause batch is scheduled or running.
        self._consumerPauseInProgress: bool = False
        # Local ids of Consumers to resume, indexed by Consumer id.
        self._pendingResumeConsumers: Dict[str, str] = {}
        # Whether a resume batch is scheduled or running.
        self._consumerResumeInProgress: bool = False

    @property
    def closed(self) -> bool:
        return self._closed

    # Whether the probator Consumer has been created.
    @property
    def probatorConsumerCreated(self) -> bool:
        return self._probatorConsumerCreated

    # Ids of Consumers waiting to be paused.
    @property
    def pendingPauseIds(self) -> List[str]:
        return list(self._pendingPauseConsumers.keys())

    # Ids of Consumers waiting to be resumed.
    @property
    def pendingResumeIds(self) -> List[str]:
        return list(self._pendingResumeConsumers.keys())

    # Number of Consumer creations not taken by a batch yet.
    @property
    def pendingCreationCount(self) -> int:
        return len(self._pendingConsumerTasks)

    def _getLoop(self):
        if self._loop is None:
            self._loop = asyncio.get_running_loop()
        return self._loop

    def createConsumer(self, options: ConsumerOptions) -> asyncio.Future:
        future = self._getLoop().create_future()

        if self._closed:
            future.set_exception(InvalidStateError('closed'))
            return future

        self._pendingConsumerTasks.append(ConsumerCreationTask(options, future))

        if not self._consumerCreationInProgress:
            self._scheduleConsumerCreation()

        return future

    def pauseConsumer(self, id: str, localId: str):
        if self._closed:
            return

        self._pendingResumeConsumers.pop(id, None)
        self._pendingPauseConsumers[id] = localId

        if not self._consumerPauseInProgress:
            self._consumerPauseInProgress = True
            self._getLoop().call_soon(self._schedulePendingPause)

    def resumeConsumer(self, id: str, localId: str):
        if self._closed:
            return

        self._pendingPauseConsumers.pop(id, None)
        self._pendingResumeConsumers[id] = localId

        if not self._consumerResumeInProgress:
            self._consumerResumeInProgress = True
            self._getLoop().call_soon(self._schedulePendingResume)

    def closeConsumer(self, id: str, localId: str):
        self._pendingPauseConsumers.pop(id, None)
        self._pendingResumeConsumers.pop(id, None)

        if self._closed:
            return

        future = self._queue.push(lambda: self._handler.stopReceiving([localId]), 'stopReceiving')

        def onStopReceivingDone(future: asyncio.Future):
            if not future.cancelled() and future.exception():
                self._logger.warning(
                    f'ConsumerScheduler closeConsumer() | stopReceiving() failed [id:{id}]: {future.exception()!r}')

        future.add_done_callback(onStopReceivingDone)

    def close(self):
        if self._closed:
            return

        self._closed = True

        tasks = self._pendingConsumerTasks
        self._pendingConsumerTasks = []
        for task in tasks:
            if not task.future.done():
                task.future.set_exception(InvalidStateError('closed'))

        self._pendingPauseConsumers.clear()
        self._pendingResumeConsumers.clear()

    def _scheduleConsumerCreation(self):
        self._consumerCreationInProgress = True
        future = self._queue.push(self._createPendingConsumers, 'createPendingConsumers')
        future.add_done_callback(self._onConsumerCreationDone)

    def _onConsumerCreationDone(self, future: asyncio.Future):
        self._consumerCreationInProgress = False

        if future.cancelled():
            error: Optional[BaseException] = InvalidStateError('closed')
        else:
            error = future.exception()

        # The batch never ran, reject whoever is still waiting.
        if error is not None:
            tasks = self._pendingConsumerTasks
            self._pendingConsumerTasks = []
            for task in tasks:
                if not task.future.done():
                    task.future.set_exception(error)
            return

        if self._pendingConsumerTasks and not self._closed:
            self._scheduleConsumerCreation()

    async def _createPendingConsumers(self):
        tasks = self._pendingConsumerTasks
        self._pendingConsumerTasks = []

        if not tasks:
            return

        self._logger.debug(f'ConsumerScheduler _createPendingConsumers() [count:{len(tasks)}]')

        optionsList = [
            HandlerReceiveOptions(
                trackId=task.options.id,
                kind=task.options.kind,
                rtpParameters=task.options.rtpParameters,
                streamId=task.options.streamId
            ) for task in tasks
        ]

        try:
            results: List[HandlerReceiveResult] = await self._handler.receive(optionsList)
        except Exception as e:
            self._logger.error(f'ConsumerScheduler _createPendingConsumers() | receive() failed: {e!r}')
            for task in tasks:
                if not task.future.done():
                    task.future.set_exception(e)
            return

        videoConsumerForProbator = None
        # Receivers whose caller gave up waiting.
        abandonedLocalIds: List[str] = []

        for task, result in zip(tasks, results):
            if task.future.done():
                abandonedLocalIds.append(result.localId)
                continue

            try:
                consumer = self._consumerFactory(task.options, result)
            except Exception as e:
                if not task.future.done():
                    task.future.set_exception(e)
                continue

            if not task.future.done():
                task.future.set_result(consumer)

            if videoConsumerForProbator is None and task.options.kind == 'video':
                videoConsumerForProbator = consumer

        # Tasks left without a result.
        for task in tasks[len(results):]:
            if not task.future.done():
                task.future.set_exception(InvalidStateError('no receive result for Consumer'))

        if abandonedLocalIds:
            self._logger.debug(
                f'ConsumerScheduler _createPendingConsumers() | stopping abandoned receivers [localIds:{abandonedLocalIds}]')
            try:
                await self._handler.stopReceiving(abandonedLocalIds)
            except Exception as e:
                self._logger.warning(
                    f'ConsumerScheduler _createPendingConsumers() | stopReceiving() failed: {e!r}')

        # If RTP probation must be handled, do it now.
        if videoConsumerForProbator is not None and not self._probatorConsumerCreated:
            try:
                probatorRtpParameters = generateProbatorRtpParameters(videoConsumerForProbator.rtpParameters)
                await self._handler.receive([
                    HandlerReceiveOptions(
                        trackId=RTP_PROBATOR_MID,
                        kind='video',
                        rtpParameters=probatorRtpParameters
                    )
                ])
                self._logger.debug('ConsumerScheduler _createPendingConsumers() | Consumer for RTP probation created')
                self._probatorConsumerCreated = True
            except Exception as e:
                self._logger.error(
                    f'ConsumerScheduler _createPendingConsumers() | failed to create Consumer for RTP probation: {e!r}')

    def _schedulePendingPause(self):
        if self._closed:
            self._consumerPauseInProgress = False
            return

        future = self._queue.push(self._pausePendingConsumers, 'pausePendingConsumers')
        future.add_done_callback(self._onConsumerPauseDone)

    def _onConsumerPauseDone(self, future: asyncio.Future):
        self._consumerPauseInProgress = False
        if not future.cancelled():
            future.exception()

        if self._pendingPauseConsumers and not self._closed:
            self._consumerPauseInProgress = True
            self._schedulePendingPause()

    async def _pausePendingConsumers(self):
        localIds = list(self._pendingPauseConsumers.values())
        self._pendingPauseConsumers.clear()

        if not localIds:
            return

        try:
            await self._handler.pauseReceiving(localIds)
        except Exception as e:
            self._logger.error(f'ConsumerScheduler _pausePendingConsumers() | pauseReceiving() failed: {e!r}')

    def _schedulePendingResume(self):
        if self._closed:
            self._consumerResumeInProgress = False
            return

        future = self._queue.push(self._resumePendingConsumers, 'resumePendingConsumers')
        future.add_done_callback(self._onConsumerResumeDone)

    def _onConsumerResumeDone(self, future: asyncio.Future):
        self._consumerResumeInProgress = False
        if not future.cancelled():
            future.exception()

        if self._pendingResumeConsumers and not self._closed:
            self._consumerResumeInProgress = True
            self._schedulePendingResume()

    async def _resumePendingConsumers(self):
        localIds = list(self._pendingResumeConsumers.values())
        self._pendingResumeConsumers.clear()

        if not localIds:
            return

        try:
            await self._handler.resumeReceiving(localIds)
        except Exception as e:
            self._logger.error(f'ConsumerScheduler _resumePendingConsumers() | resumeReceiving() failed: {e!r}')
