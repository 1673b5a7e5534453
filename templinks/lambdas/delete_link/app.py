import logging

from templinks.exceptions import ConfigurationError
from templinks.types import LambdaContext, LambdaEvent, LambdaResponse
from templinks.utils import guarantee_500_response
from templinks.lambdas.common import link_lifecycle, path_short_id, response_200, response_400, response_404, response_500
from templinks.lambdas.constants import CONFIGURATION_ERROR, LINK_DELETED, LINK_NOT_FOUND, MISSING_SHORT_ID


logger = logging.getLogger(__name__)


@guarantee_500_response
def lambda_handler(event: LambdaEvent, context: LambdaContext) -> LambdaResponse:
    """Handle incoming API Gateway requests to delete a link

    Deleting expires the link. It stays queryable and is reported as expired.

    HTTP responses:
        200: Link deleted
        400: Missing `shortId` path parameter
        404: Unknown link
        500: Internal server error
    """
    try:
        lifecycle = link_lifecycle('delete_link')
    except (ConfigurationError, FileNotFoundError):
        logger.exception('Failed to load configuration. Responding with 500.', extra={'event': CONFIGURATION_ERROR})
        return response_500()

    short_id = path_short_id(event)
    if short_id is None:
        logger.info('Missing "shortId" in path. Responding with 400.', extra={'event': MISSING_SHORT_ID})
        return response_400(message="missing 'shortId' in path", error_code=MISSING_SHORT_ID)

    if not lifecycle.remove(short_id):
        logger.info('Link not found. Responding with 404.', extra={'shortId': short_id, 'event': LINK_NOT_FOUND})
        return response_404(error_code=LINK_NOT_FOUND)

    logger.info('Link deleted. Responding with 200.', extra={'shortId': short_id, 'event': LINK_DELETED})
    return response_200({'message': 'Link deleted successfully'})
