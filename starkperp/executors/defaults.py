"""Default executor configuration.

This module defines the default HTTP executor implementation used by the
starkperp client when no custom executor is provided.
"""

from typing import Type

from starkperp.executors.httpx import HttpxHttpExecutor
from starkperp.executors.interface import HttpExecutor

DEFAULT_HTTP_EXECUTOR: Type[HttpExecutor] = HttpxHttpExecutor
