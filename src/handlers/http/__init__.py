from .rpc import call_backend
from .stream import handle_stream_request

__all__ = ["call_backend", "handle_stream_request"]
