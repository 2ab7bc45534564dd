from starkperp.executors.defaults import DEFAULT_HTTP_EXECUTOR
from starkperp.executors.httpx import HttpxHttpExecutor
from starkperp.executors.interface import HttpExecutor, HttpResponse
from starkperp.executors.requests import RequestsHttpExecutor

__all__ = [
    "HttpExecutor",
    "HttpResponse",
    "HttpxHttpExecutor",
    "RequestsHttpExecutor",
    "DEFAULT_HTTP_EXECUTOR",
]
