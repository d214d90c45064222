# app/utils/retry.py
from tenacity import (
    retry,
    retry_if_exception_type,
    retry_if_result,
    stop_after_attempt,
    stop_after_delay,
    wait_exponential,
    wait_random,
)
import redis


def redis_retry():
    return retry(
        reraise=True,
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=0.2, min=0.2, max=2),
        retry=retry_if_exception_type(redis.RedisError),
    )


def lock_wait(timeout: float):
    """
    Odpytuje acquire dopoki nie zwroci True albo nie minie timeout.
    Po timeoucie zwraca ostatni wynik (False) zamiast rzucac RetryError.
    """
    return retry(
        stop=stop_after_delay(timeout),
        wait=wait_random(min=0.01, max=0.05),
        retry=retry_if_result(lambda acquired: not acquired),
        retry_error_callback=lambda state: state.outcome.result(),
    )
