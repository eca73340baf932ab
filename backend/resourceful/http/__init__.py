from resourceful.http.formatters import ResponseFormat
from resourceful.http.request import RequestAdapter
from resourceful.http.response import OutputBuffer, ResponseAdapter

__all__ = ["OutputBuffer", "RequestAdapter", "ResponseAdapter", "ResponseFormat"]
