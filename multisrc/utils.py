# SPDX-FileCopyrightText: 2019-2025 Valéry Febvre
# SPDX-License-Identifier: GPL-3.0-or-later
# Author: Valéry Febvre <vfebvre@easter-eggs.com>

from collections import deque
from gettext import gettext as _
import logging
import threading
import time
import traceback

import magic
import requests
from requests.adapters import HTTPAdapter
from requests.adapters import TimeoutSauce
from urllib3.util.retry import Retry

from multisrc.consts import REQUESTS_TIMEOUT

logger = logging.getLogger('multisrc')


def get_buffer_mime_type(buffer):
    """
    Returns the MIME type of a buffer

    :param buffer: A binary string
    :type buffer: bytes

    :return: The detected MIME type, empty string otherwise
    :rtype: str
    """
    try:
        if hasattr(magic, 'detect_from_content'):
            # Using file-magic module: https://github.com/file/file
            return magic.detect_from_content(buffer[:128]).mime_type  # noqa: TC300

        # Using python-magic module: https://github.com/ahupp/python-magic
        return magic.from_buffer(buffer[:128], mime=True)  # noqa: TC300
    except Exception:
        return ''


def log_error_traceback(e):
    from multisrc.servers.exceptions import ServerException

    if isinstance(e, requests.exceptions.RequestException):
        return _('No Internet connection, timeout or server down')
    if isinstance(e, ServerException):
        return e.message

    logger.info(traceback.format_exc())

    return None


def remove_number_leading_zero(str_num):
    """Remove leading zero in a number string

    '00123' => '123' (int)
    '00123.45' => '123.45' (float)
    """
    return str(int(float(str_num))) if int(float(str_num)) == float(str_num) else str(float(str_num))


class RateLimitAdapter(HTTPAdapter):
    """
    Transport adapter which allows at most `permits` requests in any window of `period` seconds

    Requests exceeding the limit are delayed until the oldest request of the window expires.
    """

    def __init__(self, permits, period, **kwargs):
        if permits < 1:
            raise ValueError('permits must be greater than or equal to 1')
        if period <= 0:
            raise ValueError('period must be greater than 0')

        self.permits = permits
        self.period = period
        self._lock = threading.Lock()
        self._timestamps = deque()

        super().__init__(**kwargs)

    def acquire(self):
        with self._lock:
            now = time.monotonic()
            while self._timestamps and self._timestamps[0] <= now - self.period:
                self._timestamps.popleft()

            if len(self._timestamps) >= self.permits:
                delay = self._timestamps[0] + self.period - now
                if delay > 0:
                    logger.debug('Rate limit reached ({0}/{1}s), waiting {2:.2f}s'.format(self.permits, self.period, delay))
                    time.sleep(delay)
                self._timestamps.popleft()

            self._timestamps.append(time.monotonic())

    def has_limit(self, permits, period):
        return self.permits == permits and self.period == period

    def send(self, request, **kwargs):
        self.acquire()

        return super().send(request, **kwargs)


def rate_limited_session(session, permits, period):
    """
    Mounts a rate limit adapter on a session

    :param session: A session
    :type session: requests.sessions.Session

    :param permits: Maximum number of requests allowed in a window
    :type permits: int

    :param period: Duration of the window (seconds)
    :type period: float

    :return: The session
    :rtype: requests.sessions.Session
    """
    current_adapter = session.adapters.get('https://')
    if isinstance(current_adapter, RateLimitAdapter) and current_adapter.has_limit(permits, period):
        return session

    max_retries = current_adapter.max_retries if current_adapter is not None else 0
    adapter = RateLimitAdapter(permits, period, max_retries=max_retries)

    session.mount('http://', adapter)
    session.mount('https://', adapter)

    return session


def retry_session(session=None, retries=3, allowed_methods=['GET'], backoff_factor=0.3, status_forcelist=None):
    if session is None:
        session = requests.Session()
    elif not getattr(session, 'adapters', None) or session.adapters['https://'].max_retries.total == retries:
        # Retry adapter is already modified or session is not a `requests (HTTP client)` session
        return session

    retry = Retry(
        total=retries,
        read=retries,
        connect=retries,
        allowed_methods=allowed_methods,
        backoff_factor=backoff_factor,
        status_forcelist=status_forcelist,
    )

    current_adapter = session.adapters['https://']
    if isinstance(current_adapter, RateLimitAdapter):
        # Keep rate limit
        adapter = RateLimitAdapter(current_adapter.permits, current_adapter.period, max_retries=retry)
    else:
        adapter = HTTPAdapter(max_retries=retry)

    session.mount('http://', adapter)
    session.mount('https://', adapter)

    return session


class BaseServer:
    id: str
    name: str

    headers = None
    status = 'enabled'

    __sessions = {}  # to cache all existing sessions

    @property
    def session(self):
        return BaseServer.__sessions.get(self.id)

    @session.setter
    def session(self, value):
        BaseServer.__sessions[self.id] = value

    def session_get(self, *args, **kwargs):
        try:
            r = retry_session(session=self.session).get(*args, **kwargs)
        except Exception as error:
            logger.debug(error)
            raise

        return r

    def session_post(self, *args, **kwargs):
        try:
            r = self.session.post(*args, **kwargs)
        except Exception as error:
            logger.debug(error)
            raise

        return r


class CustomTimeout(TimeoutSauce):
    def __init__(self, *args, **kwargs):
        if kwargs['connect'] is None:
            kwargs['connect'] = REQUESTS_TIMEOUT
        if kwargs['read'] is None:
            kwargs['read'] = REQUESTS_TIMEOUT * 2
        super().__init__(*args, **kwargs)


# Set requests timeout globally, instead of specifying ``timeout=..`` kwarg on each call
requests.adapters.TimeoutSauce = CustomTimeout
