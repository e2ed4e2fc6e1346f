import unittest

from sfulink import ortc
from sfulink.rtp_parameters import (
    RtpCapabilities,
    RtpCodecCapability,
    RtpParameters,
    RtpEncodingParameters,
    RtpHeaderExtension,
)
from sfulink.sctp_parameters import SctpCapabilities, SctpParameters, SctpStreamParameters

from .fake_parameters import (
    generateRouterRtpCapabilities,
    generateNativeRtpCapabilities,
    generateConsumerRemoteParameters,
)


def _caps(codecs, headerExtensions=None) -> RtpCapabilities:
    caps = RtpCapabilities(codecs=codecs, headerExtensions=headerExtensions or [])
    ortc.validateRtpCapabilities(caps)
    return caps


VP8_WITH_RTX_LOCAL = [
    {'mimeType': 'video/VP8', 'preferredPayloadType': 96, 'clockRate': 90000},
    {'mimeType': 'video/rtx', 'preferredPayloadType': 97, 'clockRate': 90000, 'parameters': {'apt': 96}}
]

VP8_WITH_RTX_REMOTE = [
    {'mimeType': 'video/VP8', 'preferredPayloadType': 101, 'clockRate': 90000},
    {'mimeType': 'video/rtx', 'preferredPayloadType': 102, 'clockRate': 90000, 'parameters': {'apt': 101}}
]


class TestExtendedRtpCapabilities(unittest.TestCase):
    def setUp(self):
        self.localCaps = _caps(VP8_WITH_RTX_LOCAL)
        self.remoteCaps = _caps(VP8_WITH_RTX_REMOTE)

    def test_vp8_with_rtx_keeps_both_numberings(self):
        extended = ortc.getExtendedRtpCapabilities(self.localCaps, self.remoteCaps)

        self.assertEqual(len(extended.codecs), 1)
        codec = extended.codecs[0]
        self.assertEqual(codec.kind, 'video')
        self.assertEqual(codec.localPayloadType, 96)
        self.assertEqual(codec.localRtxPayloadType, 97)
        self.assertEqual(codec.remotePayloadType, 101)
        self.assertEqual(codec.remoteRtxPayloadType, 102)

    def test_rtx_requires_both_sides(self):
        remoteCaps = _caps(VP8_WITH_RTX_REMOTE[:1])
        extended = ortc.getExtendedRtpCapabilities(self.localCaps, remoteCaps)

        self.assertEqual(extended.codecs[0].localRtxPayloadType, None)
        self.assertEqual(extended.codecs[0].remoteRtxPayloadType, None)

        recvCaps = ortc.getRecvRtpCapabilities(extended)
        self.assertListEqual([codec.mimeType for codec in recvCaps.codecs], ['video/VP8'])

        rtpParameters = ortc.getSendingRtpParameters('video', extended)
        self.assertListEqual([codec.mimeType for codec in rtpParameters.codecs], ['video/VP8'])

    def test_recv_capabilities_use_remote_payload_types(self):
        extended = ortc.getExtendedRtpCapabilities(self.localCaps, self.remoteCaps)
        recvCaps = ortc.getRecvRtpCapabilities(extended)

        self.assertListEqual(
            [(codec.mimeType, codec.preferredPayloadType) for codec in recvCaps.codecs],
            [('video/VP8', 101), ('video/rtx', 102)]
        )
        self.assertDictEqual(recvCaps.codecs[1].parameters, {'apt': 101})

    def test_sending_parameters_use_local_payload_types(self):
        extended = ortc.getExtendedRtpCapabilities(self.localCaps, self.remoteCaps)
        rtpParameters = ortc.getSendingRtpParameters('video', extended)

        self.assertListEqual(
            [(codec.mimeType, codec.payloadType) for codec in rtpParameters.codecs],
            [('video/VP8', 96), ('video/rtx', 97)]
        )
        self.assertDictEqual(rtpParameters.codecs[1].parameters, {'apt': 96})
        self.assertEqual(rtpParameters.mid, None)
        self.assertListEqual(rtpParameters.encodings, [])

    def test_sending_parameters_carry_a_single_codec_per_kind(self):
        localCaps = _caps(VP8_WITH_RTX_LOCAL + [
            {'mimeType': 'video/VP9', 'preferredPayloadType': 98, 'clockRate': 90000},
            {'mimeType': 'video/rtx', 'preferredPayloadType': 99, 'clockRate': 90000, 'parameters': {'apt': 98}}
        ])
        remoteCaps = _caps([
            {'mimeType': 'video/VP9', 'preferredPayloadType': 103, 'clockRate': 90000},
            {'mimeType': 'video/rtx', 'preferredPayloadType': 104, 'clockRate': 90000, 'parameters': {'apt': 103}}
        ] + VP8_WITH_RTX_REMOTE)
        extended = ortc.getExtendedRtpCapabilities(localCaps, remoteCaps)

        # Remote preference order is kept.
        self.assertListEqual([codec.mimeType for codec in extended.codecs], ['video/VP9', 'video/VP8'])

        rtpParameters = ortc.getSendingRtpParameters('video', extended)
        self.assertListEqual(
            [(codec.mimeType, codec.payloadType) for codec in rtpParameters.codecs],
            [('video/VP9', 98), ('video/rtx', 99)]
        )

        remoteRtpParameters = ortc.getSendingRemoteRtpParameters('video', extended)
        self.assertListEqual(
            [codec.mimeType for codec in remoteRtpParameters.codecs],
            ['video/VP9', 'video/rtx']
        )

        # Nothing to send for a kind without codecs.
        self.assertListEqual(ortc.getSendingRtpParameters('audio', extended).codecs, [])

    def test_sending_remote_parameters_use_remote_codec_parameters(self):
        localCaps = _caps([
            {'mimeType': 'audio/opus', 'preferredPayloadType': 111, 'clockRate': 48000, 'channels': 2,
             'parameters': {'minptime': 10}}
        ])
        remoteCaps = _caps([
            {'mimeType': 'audio/opus', 'preferredPayloadType': 100, 'clockRate': 48000, 'channels': 2,
             'parameters': {'useinbandfec': 1}}
        ])
        extended = ortc.getExtendedRtpCapabilities(localCaps, remoteCaps)

        self.assertDictEqual(ortc.getSendingRtpParameters('audio', extended).codecs[0].parameters, {'minptime': 10})
        remoteCodec = ortc.getSendingRemoteRtpParameters('audio', extended).codecs[0]
        self.assertEqual(remoteCodec.payloadType, 111)
        self.assertDictEqual(remoteCodec.parameters, {'useinbandfec': 1})

    def test_audio_channels(self):
        localCaps = _caps([
            {'mimeType': 'audio/opus', 'preferredPayloadType': 111, 'clockRate': 48000, 'channels': 2}
        ])

        stereo = _caps([{'mimeType': 'audio/opus', 'preferredPayloadType': 100, 'clockRate': 48000, 'channels': 2}])
        mono = _caps([{'mimeType': 'audio/opus', 'preferredPayloadType': 100, 'clockRate': 48000}])
        surround = _caps([{'mimeType': 'audio/opus', 'preferredPayloadType': 100, 'clockRate': 48000, 'channels': 6}])

        self.assertEqual(len(ortc.getExtendedRtpCapabilities(localCaps, stereo).codecs), 1)
        self.assertEqual(len(ortc.getExtendedRtpCapabilities(localCaps, mono).codecs), 1)
        self.assertEqual(len(ortc.getExtendedRtpCapabilities(localCaps, surround).codecs), 0)

    def test_clock_rate_must_match(self):
        localCaps = _caps([{'mimeType': 'audio/opus', 'preferredPayloadType': 111, 'clockRate': 48000}])
        remoteCaps = _caps([{'mimeType': 'audio/OPUS', 'preferredPayloadType': 100, 'clockRate': 16000}])

        self.assertEqual(len(ortc.getExtendedRtpCapabilities(localCaps, remoteCaps).codecs), 0)

    def test_rtcp_feedback_is_reduced(self):
        localCaps = _caps([{
            'mimeType': 'video/VP8',
            'preferredPayloadType': 96,
            'clockRate': 90000,
            'rtcpFeedback': [{'type': 'nack'}, {'type': 'nack', 'parameter': 'pli'}, {'type': 'goog-remb'}]
        }])
        remoteCaps = _caps([{
            'mimeType': 'video/VP8',
            'preferredPayloadType': 101,
            'clockRate': 90000,
            'rtcpFeedback': [{'type': 'nack', 'parameter': 'pli'}, {'type': 'ccm', 'parameter': 'fir'}]
        }])
        extended = ortc.getExtendedRtpCapabilities(localCaps, remoteCaps)

        self.assertListEqual(
            [(fb.type, fb.parameter) for fb in extended.codecs[0].rtcpFeedback],
            [('nack', 'pli')]
        )

    def test_can_send(self):
        extended = ortc.getExtendedRtpCapabilities(self.localCaps, self.remoteCaps)
        self.assertTrue(ortc.canSend('video', extended))
        self.assertFalse(ortc.canSend('audio', extended))


class TestH264Matching(unittest.TestCase):
    def _h264(self, payloadType, profileLevelId, packetizationMode=1):
        return {
            'mimeType': 'video/H264',
            'preferredPayloadType': payloadType,
            'clockRate': 90000,
            'parameters': {
                'level-asymmetry-allowed': 1,
                'packetization-mode': packetizationMode,
                'profile-level-id': profileLevelId
            }
        }

    def test_same_profile_matches(self):
        localCaps = _caps([self._h264(125, '42e01f')])
        remoteCaps = _caps([self._h264(103, '42e01f')])
        extended = ortc.getExtendedRtpCapabilities(localCaps, remoteCaps)

        self.assertEqual(len(extended.codecs), 1)
        self.assertEqual(extended.codecs[0].localPayloadType, 125)
        self.assertEqual(extended.codecs[0].remotePayloadType, 103)

    def test_different_profile_does_not_match(self):
        localCaps = _caps([self._h264(125, '640032')])
        remoteCaps = _caps([self._h264(103, '42e01f')])

        self.assertEqual(len(ortc.getExtendedRtpCapabilities(localCaps, remoteCaps).codecs), 0)

    def test_packetization_mode_must_match(self):
        localCaps = _caps([self._h264(125, '42e01f', packetizationMode=0)])
        remoteCaps = _caps([self._h264(103, '42e01f', packetizationMode=1)])

        self.assertEqual(len(ortc.getExtendedRtpCapabilities(localCaps, remoteCaps).codecs), 0)

    def test_loose_matching_ignores_profile(self):
        aCodec = RtpCodecCapability(**self._h264(125, '640032'))
        bCodec = RtpCodecCapability(**self._h264(103, '42e01f'))

        self.assertTrue(ortc.matchCodecs(aCodec, bCodec))
        self.assertFalse(ortc.matchCodecs(aCodec, bCodec, strict=True))

    def test_vp9_profile_id_must_match(self):
        localCaps = _caps([{
            'mimeType': 'video/VP9', 'preferredPayloadType': 98, 'clockRate': 90000, 'parameters': {'profile-id': 2}
        }])
        remoteCaps = _caps([{
            'mimeType': 'video/VP9', 'preferredPayloadType': 103, 'clockRate': 90000, 'parameters': {'profile-id': 0}
        }])

        self.assertEqual(len(ortc.getExtendedRtpCapabilities(localCaps, remoteCaps).codecs), 0)


class TestHeaderExtensions(unittest.TestCase):
    def setUp(self):
        localCaps = _caps(VP8_WITH_RTX_LOCAL, [
            {'kind': 'video', 'uri': 'urn:test:a', 'preferredId': 3},
            {'kind': 'video', 'uri': 'urn:test:b', 'preferredId': 4},
            {'kind': 'video', 'uri': 'urn:test:c', 'preferredId': 5},
            {'kind': 'video', 'uri': 'urn:test:local-only', 'preferredId': 6}
        ])
        remoteCaps = _caps(VP8_WITH_RTX_REMOTE, [
            {'kind': 'video', 'uri': 'urn:test:a', 'preferredId': 13, 'direction': 'recvonly'},
            {'kind': 'video', 'uri': 'urn:test:b', 'preferredId': 14, 'direction': 'sendonly'},
            {'kind': 'video', 'uri': 'urn:test:c', 'preferredId': 15, 'direction': 'sendrecv'},
            {'kind': 'audio', 'uri': 'urn:test:c', 'preferredId': 16, 'direction': 'sendrecv'}
        ])
        self.extended = ortc.getExtendedRtpCapabilities(localCaps, remoteCaps)

    def test_direction_is_reversed(self):
        self.assertListEqual(
            [(ext.kind, ext.uri, ext.direction) for ext in self.extended.headerExtensions],
            [
                ('video', 'urn:test:a', 'sendonly'),
                ('video', 'urn:test:b', 'recvonly'),
                ('video', 'urn:test:c', 'sendrecv')
            ]
        )

    def test_send_and_recv_ids(self):
        self.assertListEqual(
            [(ext.sendId, ext.recvId) for ext in self.extended.headerExtensions],
            [(3, 13), (4, 14), (5, 15)]
        )

    def test_recv_capabilities_only_keep_receivable_extensions(self):
        recvCaps = ortc.getRecvRtpCapabilities(self.extended)

        self.assertListEqual(
            [(ext.uri, ext.preferredId) for ext in recvCaps.headerExtensions],
            [('urn:test:b', 14), ('urn:test:c', 15)]
        )

    def test_sending_parameters_only_keep_sendable_extensions(self):
        rtpParameters = ortc.getSendingRtpParameters('video', self.extended)

        self.assertListEqual(
            [(ext.uri, ext.id) for ext in rtpParameters.headerExtensions],
            [('urn:test:a', 3), ('urn:test:c', 5)]
        )

    def test_kind_is_optional(self):
        extA = RtpHeaderExtension(uri='urn:test:a', preferredId=1)
        extB = RtpHeaderExtension(kind='audio', uri='urn:test:a', preferredId=2)
        extC = RtpHeaderExtension(kind='video', uri='urn:test:a', preferredId=3)

        self.assertTrue(ortc.matchHeaderExtensions(extA, extB))
        self.assertFalse(ortc.matchHeaderExtensions(extB, extC))


class TestRtcpFeedbackPolicy(unittest.TestCase):
    def _extended(self, uris):
        feedback = [{'type': 'goog-remb'}, {'type': 'transport-cc'}, {'type': 'nack'}]
        localCaps = _caps(
            [{'mimeType': 'video/VP8', 'preferredPayloadType': 96, 'clockRate': 90000, 'rtcpFeedback': feedback}],
            [{'kind': 'video', 'uri': uri, 'preferredId': idx + 1} for idx, uri in enumerate(uris)]
        )
        remoteCaps = _caps(
            [{'mimeType': 'video/VP8', 'preferredPayloadType': 101, 'clockRate': 90000, 'rtcpFeedback': feedback}],
            [{'kind': 'video', 'uri': uri, 'preferredId': idx + 1} for idx, uri in enumerate(uris)]
        )
        return ortc.getExtendedRtpCapabilities(localCaps, remoteCaps)

    def _feedbackTypes(self, uris):
        rtpParameters = ortc.getSendingRemoteRtpParameters('video', self._extended(uris))
        return [fb.type for fb in rtpParameters.codecs[0].rtcpFeedback]

    def test_transport_cc_wins(self):
        self.assertListEqual(
            self._feedbackTypes([ortc.ABS_SEND_TIME_URI, ortc.TRANSPORT_WIDE_CC_URI]),
            ['transport-cc', 'nack']
        )

    def test_remb_with_abs_send_time(self):
        self.assertListEqual(self._feedbackTypes([ortc.ABS_SEND_TIME_URI]), ['goog-remb', 'nack'])

    def test_no_bandwidth_estimation(self):
        self.assertListEqual(self._feedbackTypes([]), ['nack'])

    def test_local_sending_parameters_are_not_reduced(self):
        rtpParameters = ortc.getSendingRtpParameters('video', self._extended([]))
        self.assertListEqual(
            [fb.type for fb in rtpParameters.codecs[0].rtcpFeedback],
            ['goog-remb', 'transport-cc', 'nack']
        )


class TestProbator(unittest.TestCase):
    def test_generate_probator_rtp_parameters(self):
        videoRtpParameters = RtpParameters(**generateConsumerRemoteParameters(codecMimeType='video/VP8')['rtpParameters'])
        probatorRtpParameters = ortc.generateProbatorRtpParameters(videoRtpParameters)

        self.assertEqual(probatorRtpParameters.mid, ortc.RTP_PROBATOR_MID)
        self.assertEqual(len(probatorRtpParameters.codecs), 1)
        self.assertEqual(probatorRtpParameters.codecs[0].mimeType, 'video/VP8')
        self.assertEqual(probatorRtpParameters.codecs[0].payloadType, ortc.RTP_PROBATOR_CODEC_PAYLOAD_TYPE)
        self.assertListEqual(
            [encoding.ssrc for encoding in probatorRtpParameters.encodings],
            [ortc.RTP_PROBATOR_SSRC]
        )
        self.assertEqual(probatorRtpParameters.rtcp.cname, 'probator')
        self.assertListEqual(
            [ext.uri for ext in probatorRtpParameters.headerExtensions],
            [ortc.ABS_SEND_TIME_URI, ortc.TRANSPORT_WIDE_CC_URI]
        )

        # The given parameters are left untouched.
        self.assertEqual(videoRtpParameters.codecs[0].payloadType, 101)
        self.assertEqual(len(videoRtpParameters.headerExtensions), 5)

    def test_probator_requires_codecs(self):
        with self.assertRaises(TypeError):
            ortc.generateProbatorRtpParameters(RtpParameters())


class TestNegotiationRoundTrip(unittest.TestCase):
    def setUp(self):
        self.nativeCaps = generateNativeRtpCapabilities()
        self.routerCaps = generateRouterRtpCapabilities()
        ortc.validateRtpCapabilities(self.nativeCaps)
        ortc.validateRtpCapabilities(self.routerCaps)
        self.extended = ortc.getExtendedRtpCapabilities(self.nativeCaps, self.routerCaps)

    def test_shared_codecs_are_found(self):
        self.assertListEqual(
            [codec.mimeType for codec in self.extended.codecs],
            ['audio/opus', 'video/VP8']
        )

    def test_payload_types_come_from_their_side(self):
        localPayloadTypes = {codec.preferredPayloadType for codec in self.nativeCaps.codecs}
        remotePayloadTypes = {codec.preferredPayloadType for codec in self.routerCaps.codecs}

        for codec in self.extended.codecs:
            self.assertIn(codec.localPayloadType, localPayloadTypes)
            self.assertIn(codec.remotePayloadType, remotePayloadTypes)
            if codec.localRtxPayloadType is not None:
                self.assertIn(codec.localRtxPayloadType, localPayloadTypes)
            if codec.remoteRtxPayloadType is not None:
                self.assertIn(codec.remoteRtxPayloadType, remotePayloadTypes)

    def test_recv_capabilities_negotiate_again_with_the_router(self):
        recvCaps = ortc.getRecvRtpCapabilities(self.extended)
        ortc.validateRtpCapabilities(recvCaps)

        again = ortc.getExtendedRtpCapabilities(recvCaps, generateRouterRtpCapabilities())

        self.assertEqual(len(again.codecs), 2)
        self.assertListEqual(
            [codec.mimeType for codec in again.codecs],
            [codec.mimeType for codec in self.extended.codecs]
        )


class TestCanReceive(unittest.TestCase):
    def setUp(self):
        self.extended = ortc.getExtendedRtpCapabilities(
            generateNativeRtpCapabilities(), generateRouterRtpCapabilities())

    def test_can_receive(self):
        for mimeType in ('audio/opus', 'video/VP8'):
            rtpParameters = generateConsumerRemoteParameters(codecMimeType=mimeType)['rtpParameters']
            self.assertTrue(ortc.canReceive(rtpParameters, self.extended))
            self.assertTrue(ortc.canReceive(RtpParameters(**rtpParameters), self.extended))

    def test_cannot_receive(self):
        rtpParameters = generateConsumerRemoteParameters(codecMimeType='audio/ISAC')['rtpParameters']
        self.assertFalse(ortc.canReceive(rtpParameters, self.extended))
        self.assertFalse(ortc.canReceive(RtpParameters(), self.extended))

    def test_invalid_parameters_raise(self):
        rtpParameters = generateConsumerRemoteParameters(codecMimeType='audio/opus')['rtpParameters']
        rtpParameters['codecs'][0]['mimeType'] = 'opus'
        with self.assertRaises(TypeError):
            ortc.canReceive(rtpParameters, self.extended)


class TestReduceCodecs(unittest.TestCase):
    def setUp(self):
        extended = ortc.getExtendedRtpCapabilities(_caps(VP8_WITH_RTX_LOCAL), _caps(VP8_WITH_RTX_REMOTE))
        self.codecs = ortc.getSendingRtpParameters('video', extended).codecs

    def test_first_codec_and_rtx(self):
        self.assertListEqual(
            [codec.payloadType for codec in ortc.reduceCodecs(self.codecs)],
            [96, 97]
        )

    def test_matching_capability_codec(self):
        capCodec = RtpCodecCapability(mimeType='video/VP8', clockRate=90000)
        self.assertListEqual(
            [codec.payloadType for codec in ortc.reduceCodecs(self.codecs, capCodec)],
            [96, 97]
        )

    def test_no_match_raises(self):
        capCodec = RtpCodecCapability(mimeType='video/H264', clockRate=90000)
        with self.assertRaises(TypeError):
            ortc.reduceCodecs(self.codecs, capCodec)
        with self.assertRaises(TypeError):
            ortc.reduceCodecs([])


class TestValidators(unittest.TestCase):
    def test_capabilities_defaults(self):
        caps = _caps([
            {'mimeType': 'audio/opus', 'clockRate': 48000, 'rtcpFeedback': [{'type': 'nack'}]},
            {'mimeType': 'video/VP8', 'clockRate': 90000, 'channels': 2}
        ])

        self.assertEqual(caps.codecs[0].kind, 'audio')
        self.assertEqual(caps.codecs[0].channels, 1)
        self.assertEqual(caps.codecs[0].rtcpFeedback[0].parameter, '')
        self.assertEqual(caps.codecs[1].kind, 'video')
        self.assertEqual(caps.codecs[1].channels, None)

    def test_invalid_mime_type_raises(self):
        with self.assertRaises(TypeError):
            _caps([{'mimeType': 'chicken/opus', 'clockRate': 48000}])
        with self.assertRaises(TypeError):
            _caps([{'mimeType': 'opus', 'clockRate': 48000}])

    def test_invalid_codec_parameters_raise(self):
        with self.assertRaises(TypeError):
            _caps([{'mimeType': 'video/rtx', 'clockRate': 90000, 'parameters': {'apt': '96'}}])
        with self.assertRaises(TypeError):
            _caps([{'mimeType': 'audio/opus', 'clockRate': 48000, 'parameters': {'stereo': True}}])
        with self.assertRaises(TypeError):
            _caps([{'mimeType': 'audio/opus', 'clockRate': 48000, 'parameters': {'foo': [1]}}])

    def test_missing_fb_type_raises(self):
        with self.assertRaises(TypeError):
            _caps([{'mimeType': 'audio/opus', 'clockRate': 48000, 'rtcpFeedback': [{'type': ''}]}])

    def test_missing_header_extension_uri_raises(self):
        with self.assertRaises(TypeError):
            _caps([], [{'uri': '', 'preferredId': 1}])

    def test_wrong_types_raise(self):
        with self.assertRaises(TypeError):
            ortc.validateRtpCapabilities({'codecs': []})
        with self.assertRaises(TypeError):
            ortc.validateRtpParameters({'codecs': []})
        with self.assertRaises(TypeError):
            ortc.validateSctpCapabilities({'numStreams': {'OS': 1, 'MIS': 1}})

    def test_rtp_parameters(self):
        rtpParameters = RtpParameters(**generateConsumerRemoteParameters(codecMimeType='video/VP8')['rtpParameters'])
        rtpParameters.rtcp = None
        ortc.validateRtpParameters(rtpParameters)

        self.assertEqual(rtpParameters.codecs[0].channels, None)
        self.assertTrue(rtpParameters.rtcp.reducedSize)

    def test_invalid_encoding_raises(self):
        rtpParameters = RtpParameters(
            codecs=[{'mimeType': 'video/VP8', 'payloadType': 101, 'clockRate': 90000}],
            encodings=[RtpEncodingParameters(rid='')]
        )
        with self.assertRaises(TypeError):
            ortc.validateRtpParameters(rtpParameters)

    def test_sctp_capabilities(self):
        ortc.validateSctpCapabilities(SctpCapabilities(numStreams={'OS': 1024, 'MIS': 1024}))
        with self.assertRaises(TypeError):
            ortc.validateSctpCapabilities(SctpCapabilities(numStreams={'OS': 0, 'MIS': 1024}))

    def test_sctp_parameters(self):
        ortc.validateSctpParameters(SctpParameters(port=5000, OS=1024, MIS=1024, maxMessageSize=262144))
        with self.assertRaises(TypeError):
            ortc.validateSctpParameters(SctpParameters(port=5000, OS=1024, MIS=1024, maxMessageSize=0))

    def test_sctp_stream_parameters(self):
        params = SctpStreamParameters(streamId=1)
        ortc.validateSctpStreamParameters(params)
        self.assertTrue(params.ordered)

        params = SctpStreamParameters(streamId=1, maxRetransmits=3)
        ortc.validateSctpStreamParameters(params)
        self.assertFalse(params.ordered)

        with self.assertRaises(TypeError):
            ortc.validateSctpStreamParameters(SctpStreamParameters())
        with self.assertRaises(TypeError):
            ortc.validateSctpStreamParameters(SctpStreamParameters(streamId=1, ordered=True, maxRetransmits=3))
        with self.assertRaises(TypeError):
            ortc.validateSctpStreamParameters(
                SctpStreamParameters(streamId=1, maxPacketLifeTime=10, maxRetransmits=3))
