import logging
from typing import Optional, Any, Union, Literal
from pyee.asyncio import AsyncIOEventEmitter
from aiortc import RTCDataChannel
from .channel import EntityChannel, CloseRequest
from .errors import InvalidStateError
from .emitter import EnhancedEventEmitter
from .models.data_producer import DataProducerOptions
from .sctp_parameters import SctpStreamParameters


logger = logging.getLogger(__name__)


class DataProducer(EnhancedEventEmitter):
    # @emits transportclose
    # @emits open
    # @emits error - (error)
    # @emits close
    # @emits bufferedamountlow
    def __init__(
        self,
        id: str,
        dataChannel: RTCDataChannel,
        sctpStreamParameters: SctpStreamParameters,
        channel: EntityChannel,
        appData: Optional[dict] = None,
        loop=None
    ):
        super(DataProducer, self).__init__(loop=loop)

        logger.debug(f'DataProducer constructor() [id:{id}]')

        # Closed flag.
        self._closed: bool = False
        # Observer instance.
        self._observer: AsyncIOEventEmitter = AsyncIOEventEmitter(loop=loop)

        self._id = id
        self._dataChannel = dataChannel
        self._sctpStreamParameters = sctpStreamParameters
        self._channel = channel
        self._appData = appData if appData is not None else {}

        self._handleDataChannel()

    # DataProducer id.
    @property
    def id(self) -> str:
        return self._id

    # Whether the DataProducer is closed.
    @property
    def closed(self) -> bool:
        return self._closed

    # SCTP stream parameters.
    @property
    def sctpStreamParameters(self) -> SctpStreamParameters:
        return self._sctpStreamParameters

    # DataChannel readyState.
    @property
    def readyState(self) -> Literal['closed', 'closing', 'connecting', 'open']:
        return self._dataChannel.readyState

    # DataChannel label.
    @property
    def label(self) -> str:
        return self._dataChannel.label

    # DataChannel protocol.
    @property
    def protocol(self) -> str:
        return self._dataChannel.protocol

    # DataChannel bufferedAmount.
    @property
    def bufferedAmount(self) -> int:
        return self._dataChannel.bufferedAmount

    # DataChannel bufferedAmountLowThreshold.
    @property
    def bufferedAmountLowThreshold(self) -> int:
        return self._dataChannel.bufferedAmountLowThreshold

    # Set DataChannel bufferedAmountLowThreshold.
    @bufferedAmountLowThreshold.setter
    def bufferedAmountLowThreshold(self, bufferedAmountLowThreshold: int):
        self._dataChannel.bufferedAmountLowThreshold = bufferedAmountLowThreshold

    # App custom data.
    @property
    def appData(self) -> Any:
        return self._appData

    # Invalid setter.
    @appData.setter
    def appData(self, value):
        raise Exception('cannot override appData object')

    # Observer.
    #
    # @emits close
    @property
    def observer(self) -> AsyncIOEventEmitter:
        return self._observer

    # Closes the DataProducer.
    async def close(self):
        if self._closed:
            return

        logger.debug('DataProducer close()')

        self._closed = True

        self._dataChannel.close()

        await self._channel.request(CloseRequest())

        # Emit observer event.
        self._observer.emit('close')

    # Transport was closed.
    def transportClosed(self):
        if self._closed:
            return

        logger.debug('DataProducer transportClosed()')

        self._closed = True

        self._dataChannel.close()

        self.emit('transportclose')

        self._observer.emit('close')

    # Send a message.
    def send(self, data: Union[bytes, str]):
        logger.debug('DataProducer send()')

        if self._closed:
            raise InvalidStateError('closed')

        if not isinstance(data, (bytes, str)):
            raise TypeError('invalid data')

        self._dataChannel.send(data)

    def _handleDataChannel(self):
        @self._dataChannel.on('open')
        def on_open():
            if self._closed:
                return

            logger.debug('DataProducer DataChannel "open" event')

            self.emit('open')

        @self._dataChannel.on('error')
        def on_error(error):
            if self._closed:
                return

            logger.error(f'DataProducer DataChannel "error" event: {error}')

            # pyee raises unhandled 'error' events.
            if self.listeners('error'):
                self.emit('error', error)

        @self._dataChannel.on('close')
        def on_close():
            if self._closed:
                return

            logger.warning('DataProducer DataChannel "close" event')

            self._closed = True

            self.emit('close')

            self._channel.notify(CloseRequest())

            self._observer.emit('close')

        @self._dataChannel.on('message')
        def on_message(message):
            if self._closed:
                return

            logger.warning(f'DataProducer DataChannel "message" event in a DataProducer, message discarded: {message}')

        @self._dataChannel.on('bufferedamountlow')
        def on_bufferedamountlow():
            if self._closed:
                return

            self.emit('bufferedamountlow')
