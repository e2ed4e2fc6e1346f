from .device import Device
from .transport import Transport
from .producer import Producer
from .consumer import Consumer
from .data_producer import DataProducer
from .data_consumer import DataConsumer
from .command_queue import CommandQueue
from .consumer_scheduler import ConsumerScheduler
from .errors import Error, InvalidStateError, UnsupportedError
from .handlers.handler_interface import HandlerInterface

__version__ = '0.1.0'
