"""Shared plumbing for the temporary link request handlers

Functions:
    link_lifecycle(component) -> LinkLifecycle
        Build a LinkLifecycle on the configured link store. Stores are cached
        per process and per configuration, so every handler in one process
        shares the same in-memory store.
    path_short_id(event) -> str | None
        Extract the `shortId` path parameter from an API Gateway event.
    response_*(...)
        API Gateway proxy responses.
"""

import json
import threading
from typing import Any

from templinks.dao import LinkBaseDAO, build_link_dao
from templinks.lifecycle import LinkLifecycle
from templinks.types import LambdaEvent, LambdaResponse
from templinks.utils import load_config, app_prefix


_daos: dict[str, LinkBaseDAO] = {}
_daos_lock = threading.Lock()


def link_lifecycle(component: str) -> LinkLifecycle:
    app_config = load_config(component)
    prefix = app_prefix()
    cache_key = json.dumps([app_config, prefix], sort_keys=True, default=str)

    with _daos_lock:
        dao = _daos.get(cache_key)
        if dao is None:
            dao = _daos[cache_key] = build_link_dao(app_config, prefix=prefix)
    return LinkLifecycle(dao)


def path_short_id(event: LambdaEvent) -> str | None:
    return (event.get('pathParameters') or {}).get('shortId')


def _json_response(status_code: int, body: dict[str, Any], headers: dict[str, str] | None = None) -> LambdaResponse:
    return {
        'statusCode': status_code,
        'headers': {'Content-Type': 'application/json', **(headers or {})},
        'body': json.dumps(body),
    }


def response_200(body: dict[str, Any]) -> LambdaResponse:
    return _json_response(200, body)


def response_302(*, location: str) -> LambdaResponse:
    return {
        'statusCode': 302,
        'headers': {'Location': location},
        'body': json.dumps({}),  # no body needed for redirects
    }


def response_400(message: str | None = None, error_code: str | None = None, errors: dict | None = None) -> LambdaResponse:
    base = 'Bad Request'
    body = {'message': base if not message else f'{base} ({message})'}
    if error_code:
        body['errorCode'] = error_code
    if errors:
        body['errors'] = errors
    return _json_response(400, body)


def response_404(message: str = 'Link not found', error_code: str | None = None) -> LambdaResponse:
    body = {'message': message}
    if error_code:
        body['errorCode'] = error_code
    return _json_response(404, body)


def response_410(message: str = 'Link expired', error_code: str | None = None) -> LambdaResponse:
    body = {'message': message}
    if error_code:
        body['errorCode'] = error_code
    return _json_response(410, body)


def response_500(message: str | None = None) -> LambdaResponse:
    base = 'Internal Server Error'
    return _json_response(500, {'message': base if not message else f'{base} ({message})'})
