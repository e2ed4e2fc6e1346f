import logging
from typing import Optional, Any
from aiortc import RTCRtpReceiver, MediaStreamTrack
from pyee.asyncio import AsyncIOEventEmitter
from .channel import EntityChannel, CloseRequest, GetStatsRequest, PauseRequest, ResumeRequest
from .errors import InvalidStateError
from .emitter import EnhancedEventEmitter
from .models.consumer import ConsumerOptions
from .rtp_parameters import MediaKind, RtpParameters


logger = logging.getLogger(__name__)


class Consumer(EnhancedEventEmitter):
    # @emits transportclose
    # @emits trackended
    def __init__(
        self,
        id: str,
        localId: str,
        producerId: str,
        kind: MediaKind,
        track: MediaStreamTrack,
        rtpParameters: RtpParameters,
        channel: EntityChannel,
        rtpReceiver: Optional[RTCRtpReceiver] = None,
        appData: Optional[dict] = None,
        loop=None
    ):
        super(Consumer, self).__init__(loop=loop)

        logger.debug(f'Consumer constructor() [id:{id}, kind:{kind}]')

        # Closed flag.
        self._closed: bool = False
        # Observer instance.
        self._observer: AsyncIOEventEmitter = AsyncIOEventEmitter(loop=loop)

        self._id = id
        self._localId = localId
        self._producerId = producerId
        self._kind = kind
        self._track = track
        self._paused: bool = not getattr(track, 'enabled', True)
        self._rtpParameters = rtpParameters
        self._rtpReceiver = rtpReceiver
        self._channel = channel
        self._appData = appData if appData is not None else {}

        self._handleTrack()

    # Consumer id.
    @property
    def id(self) -> str:
        return self._id

    # Local id.
    @property
    def localId(self) -> str:
        return self._localId

    # Associated Producer id.
    @property
    def producerId(self) -> str:
        return self._producerId

    # Whether the Consumer is closed.
    @property
    def closed(self) -> bool:
        return self._closed

    # Media kind.
    @property
    def kind(self) -> MediaKind:
        return self._kind

    # Associated RTCRtpReceiver.
    @property
    def rtpReceiver(self) -> Optional[RTCRtpReceiver]:
        return self._rtpReceiver

    # The associated track.
    @property
    def track(self) -> MediaStreamTrack:
        return self._track

    # RTP parameters.
    @property
    def rtpParameters(self) -> RtpParameters:
        return self._rtpParameters

    # Whether the Consumer is paused.
    @property
    def paused(self) -> bool:
        return self._paused

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
    # @emits pause
    # @emits resume
    # @emits trackended
    @property
    def observer(self) -> AsyncIOEventEmitter:
        return self._observer

    # Closes the Consumer.
    async def close(self):
        if self._closed:
            return

        logger.debug('Consumer close()')

        self._closed = True

        self._destroyTrack()

        await self._channel.request(CloseRequest())

        # Emit observer event.
        self._observer.emit('close')

    # Transport was closed.
    def transportClosed(self):
        if self._closed:
            return

        logger.debug('Consumer transportClosed()')

        self._closed = True

        self._destroyTrack()

        self.emit('transportclose')

        self._observer.emit('close')

    # Get associated RTCRtpReceiver stats.
    async def getStats(self) -> Any:
        if self._closed:
            raise InvalidStateError('closed')

        return await self._channel.request(GetStatsRequest())

    # Pauses receiving media.
    def pause(self):
        logger.debug('Consumer pause()')

        if self._closed:
            logger.error('Consumer pause() | Consumer closed')
            return

        if self._paused:
            logger.debug('Consumer pause() | Consumer is already paused')
            return

        self._paused = True

        if hasattr(self._track, 'enabled'):
            self._track.enabled = False

        self._channel.notify(PauseRequest())

        self._observer.emit('pause')

    # Resumes receiving media.
    def resume(self):
        logger.debug('Consumer resume()')

        if self._closed:
            logger.error('Consumer resume() | Consumer closed')
            return

        if not self._paused:
            logger.debug('Consumer resume() | Consumer is already resumed')
            return

        self._paused = False

        if hasattr(self._track, 'enabled'):
            self._track.enabled = True

        self._channel.notify(ResumeRequest())

        self._observer.emit('resume')

    def _onTrackEnded(self):
        logger.debug('Consumer track "ended" event')
        self.emit('trackended')
        # Emit observer event.
        self._observer.emit('trackended')

    def _handleTrack(self):
        if not self._track:
            return

        self._track.on('ended', self._onTrackEnded)

    def _destroyTrack(self):
        if not self._track:
            return

        self._track.remove_listener('ended', self._onTrackEnded)

        if self._track.readyState != 'ended':
            self._track.stop()
