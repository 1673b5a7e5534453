import logging

from templinks.exceptions import ConfigurationError
from templinks.models import OutcomeKind
from templinks.types import LambdaContext, LambdaEvent, LambdaResponse
from templinks.utils import guarantee_500_response
from templinks.lambdas.common import (
    link_lifecycle,
    path_short_id,
    response_302,
    response_400,
    response_404,
    response_410,
    response_500,
)
from templinks.lambdas.constants import (
    CONFIGURATION_ERROR,
    LINK_EXPIRED,
    LINK_NOT_FOUND,
    MISSING_SHORT_ID,
    REDIRECT_SUCCESS,
)


logger = logging.getLogger(__name__)


@guarantee_500_response
def lambda_handler(event: LambdaEvent, context: LambdaContext) -> LambdaResponse:
    """Handle incoming API Gateway requests to follow a temporary link

    This handler follows this procedure to redirect clients:
    - Step 1: Extract shortId from request path
    - Step 2: Visit the link (counts the click and may expire it)
    - Step 3: Translate the visit outcome into a response

    HTTP responses:
        302: Successful redirect
            headers:
                Location: destination URL
        400: Missing `shortId` path parameter
        404: Unknown link
        410: Link expired (time ran out, click used up, or removed)
        500: Internal server error

    Example:
        >>> event = {'pathParameters': {'shortId': 'V1StGXR8_Z5j'}}
        >>> response = lambda_handler(event, None)
        >>> response['statusCode']
        302
        >>> response['headers']['Location']
        'https://example.com/my-page'
    """
    # 0- Get the link store for this handler
    try:
        lifecycle = link_lifecycle('redirect_link')
    except (ConfigurationError, FileNotFoundError):
        logger.exception('Failed to load configuration. Responding with 500.', extra={'event': CONFIGURATION_ERROR})
        return response_500()

    # 1- Extract shortId from request's path
    short_id = path_short_id(event)
    if short_id is None:
        logger.info('Missing "shortId" in path. Responding with 400.', extra={'event': MISSING_SHORT_ID})
        return response_400(message="missing 'shortId' in path", error_code=MISSING_SHORT_ID)

    # 2- Visit the link
    outcome = lifecycle.visit(short_id)

    # 3- Respond according to the outcome
    match outcome.kind:
        case OutcomeKind.NOT_FOUND:
            logger.info('Link not found. Responding with 404.', extra={'shortId': short_id, 'event': LINK_NOT_FOUND})
            return response_404(error_code=LINK_NOT_FOUND)
        case OutcomeKind.EXPIRED:
            logger.info('Link expired. Responding with 410.', extra={'shortId': short_id, 'event': LINK_EXPIRED})
            return response_410(error_code=LINK_EXPIRED)
        case _:
            logger.info('Redirecting client to destination URL. Responding with 302.', extra={'shortId': short_id, 'event': REDIRECT_SUCCESS})
            return response_302(location=outcome.destination_url)
