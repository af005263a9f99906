"""JSON-RPC correlation and multiplexing over one shared line stream."""

from .ids import IdAllocator
from .bridge import RpcBridge, build_request
from .demux import FrameReader
from .writer import StreamWriter, encode_line
from .frames import FrameBuffer, ResponseFrame, parse_frame
from .session import FanoutSession
from .registry import CorrelationRegistry

__all__ = [
    "CorrelationRegistry",
    "FanoutSession",
    "FrameBuffer",
    "FrameReader",
    "IdAllocator",
    "ResponseFrame",
    "RpcBridge",
    "StreamWriter",
    "build_request",
    "encode_line",
    "parse_frame",
]
