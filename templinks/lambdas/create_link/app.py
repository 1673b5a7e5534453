import json
import logging

from templinks.exceptions import ConfigurationError, ValidationError
from templinks.types import LambdaContext, LambdaEvent, LambdaResponse
from templinks.utils import get_short_url, guarantee_500_response
from templinks.lambdas.common import link_lifecycle, response_200, response_400, response_500
from templinks.lambdas.constants import CONFIGURATION_ERROR, INVALID_REQUEST, LINK_CREATED


logger = logging.getLogger(__name__)


@guarantee_500_response
def lambda_handler(event: LambdaEvent, context: LambdaContext) -> LambdaResponse:
    """Handle incoming API Gateway requests to create temporary links

    This handler follows this procedure to create links:
    - Step 1: Parse the JSON request body
    - Step 2: Validate it and store a new link (via LinkLifecycle)
    - Step 3: Respond with the stored link and its public short URL

    HTTP responses:
        200: Link created
            body: serialized link (shortId, destinationUrl, expiresAt, ...) and shortUrl
        400: Bad client request
            message: invalid JSON body or invalid fields (field messages in `errors`)
        500: Internal server error

    Example:
        >>> event = {'body': '{"destinationUrl": "https://example.com", "expirationMode": "one-hour"}'}
        >>> response = lambda_handler(event, None)
        >>> response['statusCode']
        200
    """
    # 0- Get the link store for this handler
    try:
        lifecycle = link_lifecycle('create_link')
    except (ConfigurationError, FileNotFoundError):
        logger.exception('Failed to load configuration. Responding with 500.', extra={'event': CONFIGURATION_ERROR})
        return response_500()

    # 1- Parse request body
    try:
        payload = json.loads(event.get('body') or '{}')
    except json.JSONDecodeError:
        logger.info('Invalid JSON body. Responding with 400.', extra={'event': INVALID_REQUEST})
        return response_400(message='invalid JSON body', error_code=INVALID_REQUEST)

    # 2- Validate and store the link
    try:
        link = lifecycle.create(payload)
    except ValidationError as e:
        logger.info('Invalid link request. Responding with 400.', extra={'event': INVALID_REQUEST, 'errors': e.errors})
        return response_400(message='invalid input', error_code=INVALID_REQUEST, errors=e.errors)

    # 3- Respond with the new link
    logger.info('Link created. Responding with 200.', extra={'shortId': link.short_id, 'event': LINK_CREATED})
    return response_200({**link.to_dict(), 'shortUrl': get_short_url(link.short_id, event)})
