"""
Asynchronous dispatch of signed requests.

Each request runs once on the client's thread pool and resolves its
``PendingCall`` exactly once, either with the parsed response or with a
synthetic transport-error response.
"""

import logging
import threading
from concurrent.futures import Executor, Future
from enum import Enum
from typing import Callable, Optional, Tuple

import requests

from .builder import VWSRequest
from .constants import TransportError
from .exceptions import ResponseParseError
from .models import VWSResult, parse_response

logger = logging.getLogger(__name__)

ResponseCallback = Callable[[VWSResult], None]


class RequestState(Enum):
    CREATED = "created"
    SENT = "sent"
    FINISHED = "finished"
    ERROR = "error"
    ABORTED = "aborted"
    CONNECTION_TIMED_OUT = "connection_timed_out"
    TIMED_OUT = "timed_out"


_STATE_ERRORS = {
    RequestState.ERROR: TransportError.REQUEST_ERROR,
    RequestState.ABORTED: TransportError.ABORTED,
    RequestState.CONNECTION_TIMED_OUT: TransportError.CONNECTION_TIMED_OUT,
    RequestState.TIMED_OUT: TransportError.TIMED_OUT,
}

TERMINAL_STATES = frozenset(_STATE_ERRORS) | {RequestState.FINISHED}


class PendingCall:
    """
    Handle for one in-flight request.

    ``future`` resolves with the response object; wrap it with
    ``asyncio.wrap_future`` to await it from a coroutine.
    """

    def __init__(self, request: VWSRequest, callback: Optional[ResponseCallback] = None):
        self.request = request
        self.future: "Future[VWSResult]" = Future()
        self._state = RequestState.CREATED
        self._lock = threading.Lock()
        self._worker: Optional[Future] = None

        if callback is not None:
            self.future.add_done_callback(lambda f: callback(f.result()))

    @property
    def state(self) -> RequestState:
        return self._state

    def done(self) -> bool:
        return self.future.done()

    def result(self, timeout: Optional[float] = None) -> VWSResult:
        """Block until the call resolves and return its response."""
        return self.future.result(timeout)

    def cancel(self) -> bool:
        """
        Abort the call.

        The call resolves as ``Request Aborted`` whether or not the exchange
        had started; a response arriving afterwards is discarded.

        Returns:
            True if this cancel resolved the call, False if it was already done
        """
        resolved = self._resolve(RequestState.ABORTED)
        if resolved:
            logger.warning("Request Aborted: %s %s", self.request.method, self.request.path)
            if self._worker is not None:
                self._worker.cancel()
        return resolved

    def _mark_sent(self) -> bool:
        with self._lock:
            if self._state is not RequestState.CREATED:
                return False
            self._state = RequestState.SENT
            return True

    def _resolve(self, state: RequestState, response: Optional[VWSResult] = None) -> bool:
        with self._lock:
            if self._state in TERMINAL_STATES:
                return False
            self._state = state
        if response is None:
            response = self.request.response_type.transport_error(_STATE_ERRORS[state])
        self.future.set_result(response)
        return True


class Dispatcher:
    """Sends signed requests through a shared requests.Session on an executor."""

    def __init__(self, session: requests.Session, executor: Executor, base_url: str,
                 timeout: Tuple[float, float]):
        self.session = session
        self.executor = executor
        self.base_url = base_url.rstrip('/')
        self.timeout = timeout

    def dispatch(self, request: VWSRequest, callback: Optional[ResponseCallback] = None) -> PendingCall:
        """Schedule a request and return its handle without waiting."""
        call = PendingCall(request, callback)
        call._worker = self.executor.submit(self._exchange, call)
        return call

    def _exchange(self, call: PendingCall):
        if not call._mark_sent():
            return

        request = call.request
        try:
            self._send(call)
        except Exception:
            # Any escape still ends the call; it must never stay SENT.
            logger.exception("Request Finished with Error: %s %s", request.method, request.path)
            call._resolve(RequestState.ERROR)

    def _send(self, call: PendingCall):
        request = call.request
        url = self.base_url + request.path
        logger.debug("Sending %s %s", request.method, request.path)

        kwargs = {'headers': dict(request.headers), 'timeout': self.timeout}
        if request.body:
            kwargs['data'] = request.body

        try:
            response = self.session.request(request.method, url, **kwargs)
        except requests.ConnectTimeout:
            logger.error("Connection Timed Out: %s %s", request.method, request.path)
            state = RequestState.CONNECTION_TIMED_OUT
        except requests.Timeout:
            logger.error("Processing the request Timed Out: %s %s", request.method, request.path)
            state = RequestState.TIMED_OUT
        except requests.RequestException as e:
            logger.warning("Request Finished with Error: %s %s: %s", request.method, request.path, e)
            state = RequestState.ERROR
        else:
            self._finish(call, response)
            return

        call._resolve(state)

    def _finish(self, call: PendingCall, response: requests.Response):
        request = call.request
        try:
            result = parse_response(request.response_type, response.content)
        except ResponseParseError as e:
            logger.warning("Unreadable response to %s %s (HTTP %s): %s",
                           request.method, request.path, response.status_code, e)
            call._resolve(RequestState.ERROR)
            return

        logger.debug("%s %s -> HTTP %s %s", request.method, request.path,
                     response.status_code, result.result_code)
        if not call._resolve(RequestState.FINISHED, result):
            logger.debug("Discarding response to aborted request %s %s", request.method, request.path)
