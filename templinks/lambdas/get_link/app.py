import logging

from templinks.exceptions import ConfigurationError
from templinks.types import LambdaContext, LambdaEvent, LambdaResponse
from templinks.utils import guarantee_500_response
from templinks.lambdas.common import link_lifecycle, path_short_id, response_200, response_400, response_404, response_500
from templinks.lambdas.constants import CONFIGURATION_ERROR, LINK_FOUND, LINK_NOT_FOUND, MISSING_SHORT_ID


logger = logging.getLogger(__name__)


@guarantee_500_response
def lambda_handler(event: LambdaEvent, context: LambdaContext) -> LambdaResponse:
    """Handle incoming API Gateway requests for a link's details

    Expiration is re-evaluated on read, so a link whose time ran out is
    reported (and stored) as expired.

    HTTP responses:
        200: Link details (including isExpired)
        400: Missing `shortId` path parameter
        404: Unknown link
        500: Internal server error
    """
    try:
        lifecycle = link_lifecycle('get_link')
    except (ConfigurationError, FileNotFoundError):
        logger.exception('Failed to load configuration. Responding with 500.', extra={'event': CONFIGURATION_ERROR})
        return response_500()

    short_id = path_short_id(event)
    if short_id is None:
        logger.info('Missing "shortId" in path. Responding with 400.', extra={'event': MISSING_SHORT_ID})
        return response_400(message="missing 'shortId' in path", error_code=MISSING_SHORT_ID)

    link = lifecycle.status(short_id)
    if link is None:
        logger.info('Link not found. Responding with 404.', extra={'shortId': short_id, 'event': LINK_NOT_FOUND})
        return response_404(error_code=LINK_NOT_FOUND)

    logger.debug('Link found. Responding with 200.', extra={'shortId': short_id, 'event': LINK_FOUND})
    return response_200(link.to_dict())
