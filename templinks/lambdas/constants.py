# Event codes attached to handler logs and error responses
MISSING_SHORT_ID = 'MISSING_SHORT_ID'
INVALID_REQUEST = 'INVALID_REQUEST'
LINK_CREATED = 'LINK_CREATED'
LINK_FOUND = 'LINK_FOUND'
LINK_NOT_FOUND = 'LINK_NOT_FOUND'
LINK_EXPIRED = 'LINK_EXPIRED'
LINK_DELETED = 'LINK_DELETED'
REDIRECT_SUCCESS = 'REDIRECT_SUCCESS'
CONFIGURATION_ERROR = 'CONFIGURATION_ERROR'
