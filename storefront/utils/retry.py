# storefront/utils/retry.py
from tenacity import retry, stop_after_attempt, wait_exponential, retry_if_exception, retry_if_exception_type
import requests
import redis


def _is_transient_http_error(e: BaseException) -> bool:
    if isinstance(e, (requests.ConnectionError, requests.Timeout)):
        return True
    #4xx to odpowiedz ostateczna, ponawiamy tylko bledy serwera
    if isinstance(e, requests.HTTPError) and e.response is not None:
        return e.response.status_code >= 500
    return False


def http_retry():
    return retry(
        reraise=True,
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=0.3, min=0.3, max=3),
        retry=retry_if_exception(_is_transient_http_error),
    )


#mutacje koszyka nie sa idempotentne, ponawiamy tylko gdy request nie doszedl do serwera
def http_connect_retry():
    return retry(
        reraise=True,
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=0.3, min=0.3, max=3),
        retry=retry_if_exception_type(requests.ConnectionError),
    )


def redis_retry():
    return retry(
        reraise=True,
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=0.2, min=0.2, max=2),
        retry=retry_if_exception_type(redis.RedisError),
    )
