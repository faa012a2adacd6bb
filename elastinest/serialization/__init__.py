from .post_data import PostData, PostDataKind
from .serializer import JsonSerializer, exception_to_json, format_timedelta

__all__ = [
    "JsonSerializer",
    "PostData",
    "PostDataKind",
    "exception_to_json",
    "format_timedelta",
]
