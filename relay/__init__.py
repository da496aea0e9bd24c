from relay.inference import InferenceClient, InferenceError
from relay.relay import ChatRelay
from relay.results import InferenceReply, ReplyKind, decode_reply

__all__ = [
    "ChatRelay",
    "InferenceClient",
    "InferenceError",
    "InferenceReply",
    "ReplyKind",
    "decode_reply",
]
