import inspect
import logging
from collections import deque
from dataclasses import dataclass
from typing import (
    Any,
    Callable,
    Iterable,
    NamedTuple,
    Tuple,
    TypeAlias,
)

from starkperp.executors import HttpExecutor
from starkperp.executors.interface import HttpResponse
from starkperp.signers import ActionSigner, KeyPair, SignablePayload

log = logging.getLogger(__name__)


class MockExecutorException(Exception):
    pass


class InputPack(NamedTuple):
    function_name: str
    arg_pack: Tuple


class MockOutput:
    pass


class MockValidationFailure(MockExecutorException):
    input_pack: InputPack
    message: str


class MockOutputExhausted(MockExecutorException):
    input_pack: InputPack


class MockOutputNotExhausted(MockExecutorException):
    remaining_staged_outputs: deque[MockOutput]


# returns false or raises MockValidationFailure on error
InputValidation: TypeAlias = Callable[[InputPack], bool]


@dataclass
class MockExceptionOutput(MockOutput):
    exception: Exception
    call_validation: InputValidation | None = None


@dataclass
class MockSuccessfulOutput(MockOutput):
    output: Any
    call_validation: InputValidation | None = None


def ok(body: Any = None, status: int = 200) -> HttpResponse:
    """Build a response for staging."""
    return HttpResponse(status=status, body=body)


class MockHttpExecutor(HttpExecutor):
    def __init__(self):
        self.call_log: list[InputPack] = []
        self.staged_outputs: deque[MockOutput] = deque()

    def stage_output(self, output: MockOutput | Iterable[MockOutput]) -> None:
        """Stage an output to be returned by the next request."""
        if isinstance(output, Iterable):
            self.staged_outputs.extend(output)
        else:
            self.staged_outputs.append(output)

    def _execute_mock(self, input_pack: InputPack) -> Any:
        """Execute a mock operation with the given input pack."""
        self.call_log.append(input_pack)
        if not self.staged_outputs:
            raise MockOutputExhausted(input_pack)
        output = self.staged_outputs.popleft()
        if output.call_validation is not None and not output.call_validation(
            input_pack
        ):
            raise MockValidationFailure(input_pack, "Validation failed")
        if isinstance(output, MockExceptionOutput):
            raise output.exception
        elif isinstance(output, MockSuccessfulOutput):
            return output.output
        raise MockExecutorException(f"Unexpected staged mock {output=}")

    def send_request(
        self,
        method: str,
        url: str,
        headers: dict[str, str],
        body: bytes | None = None,
    ) -> HttpResponse:
        input_pack = InputPack(
            inspect.stack()[0].function, (method, url, headers, body)
        )
        return self._execute_mock(input_pack)


class CountingSigner(ActionSigner):
    """Signer that records every payload it signs."""

    def __init__(self, signature: str = "ab" * 65):
        self.signature = signature
        self.signed: list[tuple[SignablePayload, int]] = []

    def sign(
        self,
        payload: SignablePayload,
        key_pair: KeyPair,
        network_id: int,
    ) -> str:
        self.signed.append((payload, network_id))
        return self.signature


class FailingSigner(ActionSigner):
    """Signer whose signing capability is unavailable."""

    def __init__(self, exception: Exception | None = None, result: Any = None):
        self.exception = exception
        self.result = result

    def sign(
        self,
        payload: SignablePayload,
        key_pair: KeyPair,
        network_id: int,
    ) -> str:
        if self.exception is not None:
            raise self.exception
        return self.result
