"""
:py:func:`RateLimited` is a rate limiting algorithm implemented as Python
decorator. It is used to keep the request rate of scripts within the limits
that wikis expect from bots.

The algorithm is a token bucket based on this `StackOverflow answer`_,
modified to apply a longer timeout when the rate limit is exceeded.

.. code-block:: python

    # allow at most 10 calls in 2 seconds
    @RateLimited(10, 2)
    def print_number(num):
        print(num)

.. _`StackOverflow answer`: http://stackoverflow.com/a/6415181
"""

import logging
import time
from functools import wraps
from typing import Any, Callable, TypeVar

import intlang

logger = logging.getLogger(__name__)

__all__ = ["RateLimited"]

F = TypeVar("F", bound=Callable[..., Any])


def RateLimited(rate: int, per: float) -> Callable[[F], F]:
    def decorator(func: F) -> F:
        # state shared by all calls of the decorated function
        allowance = [float(rate)]
        last_check = [time.monotonic()]

        @wraps(func)
        def rate_limit_func(*args: Any, **kwargs: Any) -> Any:
            if getattr(intlang, "_tests_are_running", False):
                return func(*args, **kwargs)

            current = time.monotonic()
            time_passed = current - last_check[0]
            last_check[0] = current
            allowance[0] += time_passed * (rate / per)
            if allowance[0] > rate:
                allowance[0] = rate  # throttle
            if allowance[0] < 1.0:
                # longer timeout than (1 - allowance) * (per / rate) after a burst
                to_sleep = (1 - allowance[0]) * per
                logger.info(
                    f"rate limit for function {func.__qualname__} exceeded, sleeping for {to_sleep:0.3f} seconds"
                )
                time.sleep(to_sleep)
                ret = func(*args, **kwargs)
                allowance[0] = rate
            else:
                ret = func(*args, **kwargs)
                allowance[0] -= 1.0
            return ret

        return rate_limit_func  # type: ignore[return-value]

    return decorator
