import logging
from typing import Optional, Any
from pyee.asyncio import AsyncIOEventEmitter
from aiortc import RTCRtpSender, MediaStreamTrack
from .channel import (
    EntityChannel,
    CloseRequest,
    GetStatsRequest,
    ReplaceTrackRequest,
    SetMaxSpatialLayerRequest,
    SetRtpEncodingParametersRequest,
)
from .emitter import EnhancedEventEmitter
from .errors import InvalidStateError, UnsupportedError
from .models.producer import ProducerCodecOptions, ProducerOptions
from .rtp_parameters import MediaKind, RtpParameters, RtpEncodingParameters


logger = logging.getLogger(__name__)


class Producer(EnhancedEventEmitter):
    # @emits transportclose
    # @emits trackended
    def __init__(
        self,
        id: str,
        localId: str,
        track: MediaStreamTrack,
        rtpParameters: RtpParameters,
        stopTracks: bool,
        disableTrackOnPause: bool,
        zeroRtpOnPause: bool,
        channel: EntityChannel,
        rtpSender: Optional[RTCRtpSender] = None,
        appData: Optional[dict] = None,
        loop=None
    ):
        super(Producer, self).__init__(loop=loop)

        logger.debug(f'Producer constructor() [id:{id}, kind:{track.kind}]')

        # Closed flag.
        self._closed: bool = False
        # Observer instance.
        self._observer: AsyncIOEventEmitter = AsyncIOEventEmitter(loop=loop)

        self._id = id
        self._localId = localId
        self._rtpSender = rtpSender
        self._track: Optional[MediaStreamTrack] = track
        self._kind: MediaKind = track.kind
        self._rtpParameters = rtpParameters
        self._channel = channel
        self._paused = (not getattr(track, 'enabled', True)) if disableTrackOnPause else False
        self._maxSpatialLayer: Optional[int] = None
        self._stopTracks = stopTracks
        self._disableTrackOnPause = disableTrackOnPause
        self._zeroRtpOnPause = zeroRtpOnPause
        self._appData = appData if appData is not None else {}

        self._handleTrack()

    # Producer id.
    @property
    def id(self) -> str:
        return self._id

    # Local id.
    @property
    def localId(self) -> str:
        return self._localId

    # Whether the Producer is closed.
    @property
    def closed(self) -> bool:
        return self._closed

    # Media kind.
    @property
    def kind(self) -> MediaKind:
        return self._kind

    # Associated RTCRtpSender.
    @property
    def rtpSender(self) -> Optional[RTCRtpSender]:
        return self._rtpSender

    # The associated track.
    @property
    def track(self) -> Optional[MediaStreamTrack]:
        return self._track

    # RTP parameters.
    @property
    def rtpParameters(self) -> RtpParameters:
        return self._rtpParameters

    # Whether the Producer is paused.
    @property
    def paused(self) -> bool:
        return self._paused

    # Max spatial layer.
    @property
    def maxSpatialLayer(self) -> Optional[int]:
        return self._maxSpatialLayer

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

    # Closes the Producer.
    async def close(self):
        if self._closed:
            return

        logger.debug('Producer close()')

        self._closed = True

        self._destroyTrack()

        await self._channel.request(CloseRequest())

        # Emit observer event.
        self._observer.emit('close')

    # Transport was closed.
    def transportClosed(self):
        if self._closed:
            return

        logger.debug('Producer transportClosed()')

        self._closed = True

        self._destroyTrack()

        self.emit('transportclose')

        self._observer.emit('close')

    # Get associated RTCRtpSender stats.
    async def getStats(self) -> Any:
        if self._closed:
            raise InvalidStateError('closed')

        return await self._channel.request(GetStatsRequest())

    # Pauses sending media.
    def pause(self):
        logger.debug('Producer pause()')

        if self._closed:
            logger.error('Producer pause() | Producer closed')
            return

        self._paused = True

        self._setTrackEnabled(False)

        if self._zeroRtpOnPause:
            self._channel.notify(ReplaceTrackRequest(track=None))

        self._observer.emit('pause')

    # Resumes sending media.
    def resume(self):
        logger.debug('Producer resume()')

        if self._closed:
            logger.error('Producer resume() | Producer closed')
            return

        self._paused = False

        self._setTrackEnabled(True)

        if self._zeroRtpOnPause:
            self._channel.notify(ReplaceTrackRequest(track=self._track))

        self._observer.emit('resume')

    # Replaces the current track with a new one or None.
    async def replaceTrack(self, track: Optional[MediaStreamTrack]):
        logger.debug(f'Producer replaceTrack() [track:{track}]')

        if self._closed:
            # This must be done here. Otherwise there is no chance to stop the given
            # track.
            if track and self._stopTracks:
                track.stop()

            raise InvalidStateError('closed')

        elif track and track.readyState == 'ended':
            raise InvalidStateError('track ended')

        # Do nothing if this is the same track as the current handled one.
        if track == self._track:
            logger.debug('Producer replaceTrack() | same track, ignored')
            return

        if not self._zeroRtpOnPause or not self._paused:
            await self._channel.request(ReplaceTrackRequest(track=track))

        # Destroy the previous track.
        self._destroyTrack()

        self._track = track

        # If this Producer was paused/resumed and the state of the new
        # track does not match, fix it.
        self._setTrackEnabled(not self._paused)

        self._handleTrack()

    # Sets the video max spatial layer to be sent.
    async def setMaxSpatialLayer(self, spatialLayer: int):
        if self._closed:
            raise InvalidStateError('closed')

        elif self._kind != 'video':
            raise UnsupportedError('not a video Producer')

        elif isinstance(spatialLayer, bool) or not isinstance(spatialLayer, int):
            raise TypeError('invalid spatialLayer')

        if spatialLayer == self._maxSpatialLayer:
            return

        await self._channel.request(SetMaxSpatialLayerRequest(spatialLayer=spatialLayer))

        self._maxSpatialLayer = spatialLayer

    # Sets RTP encoding parameters of the sender.
    async def setRtpEncodingParameters(self, params):
        if self._closed:
            raise InvalidStateError('closed')

        if isinstance(params, dict):
            params = RtpEncodingParameters(**params)
        elif not isinstance(params, RtpEncodingParameters):
            raise TypeError('invalid params')

        await self._channel.request(SetRtpEncodingParametersRequest(params=params))

    def _setTrackEnabled(self, enabled: bool):
        # aiortc tracks have no 'enabled' attribute, other track types may.
        if self._track and self._disableTrackOnPause and hasattr(self._track, 'enabled'):
            self._track.enabled = enabled

    def _onTrackEnded(self):
        logger.debug('Producer track "ended" event')
        self.emit('trackended')
        self._observer.emit('trackended')

    def _handleTrack(self):
        if not self._track:
            return

        self._track.on('ended', self._onTrackEnded)

    def _destroyTrack(self):
        if not self._track:
            return

        self._track.remove_listener('ended', self._onTrackEnded)

        if self._stopTracks and self._track.readyState != 'ended':
            self._track.stop()
