"""Mock transport for testing purposes.

This transport answers API calls from memory without making external
requests. It's useful for tests and for development when sandbox
credentials are not available.
"""

import asyncio
import uuid
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Tuple, Union

from appnexus.api.endpoints import AUTHENTICATION_SERVICE
from appnexus.api.transport.base import BaseTransport

Responder = Union[Any, Exception, Callable[[Dict[str, Any]], Any]]


@dataclass
class RecordedCall:
    """One call received by the mock transport."""
    method: str
    endpoint: str
    args: Optional[Dict[str, Any]]
    auth_token: Optional[str]


class MockTransport(BaseTransport):
    """Transport that returns scripted responses and records every call.

    Features:
    - Authentication calls return a fresh random token unless scripted
    - Responses can be values, exceptions to raise, or callables of the args
    - Configurable delay to simulate network latency
    """

    def __init__(
        self,
        api_base: str = "http://mock.api.appnexus.com",
        responses: Optional[Dict[Tuple[str, str], Responder]] = None,
        delay: float = 0.0,
    ):
        """Initialize the mock transport.

        Args:
            api_base: Not used, provided for API compatibility
            responses: Mapping of (METHOD, endpoint) to a response, an
                exception instance to raise, or a callable taking the args
            delay: Seconds to sleep before answering each call
        """
        super().__init__(api_base)
        self.responses: Dict[Tuple[str, str], Responder] = dict(responses or {})
        self.delay = delay
        self.calls: List[RecordedCall] = []
        self.closed = False

    def respond(self, method: str, endpoint: str, response: Responder) -> None:
        """Script the answer for (method, endpoint)."""
        self.responses[(method.upper(), str(endpoint))] = response

    def calls_to(self, endpoint: str) -> List[RecordedCall]:
        return [c for c in self.calls if c.endpoint == str(endpoint)]

    async def send(
        self,
        method: str,
        endpoint: str,
        args: Optional[Dict[str, Any]] = None,
        auth_token: Optional[str] = None
    ) -> Any:
        method = method.upper()
        self.calls.append(RecordedCall(method, str(endpoint), args, auth_token))

        if self.delay:
            await asyncio.sleep(self.delay)

        key = (method, str(endpoint))
        if key not in self.responses:
            if endpoint == AUTHENTICATION_SERVICE:
                return {"status": "OK", "token": f"authn:{uuid.uuid4().hex}"}
            return {"status": "OK"}

        response = self.responses[key]
        if isinstance(response, Exception):
            raise response
        if callable(response):
            return response(args or {})
        return response

    async def aclose(self) -> None:
        self.closed = True
