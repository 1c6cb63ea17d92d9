"""Canonical error code constants.

These constants are stable, machine-readable identities surfaced to API
clients. They are deliberately independent of any web framework's exception
class names so that framework upgrades never change the client contract.
Deployments extend this set in local modules rather than editing it.
"""

# Request content / parameters
TYPE_CONVERSION_ERROR = "TYPE_CONVERSION_ERROR"
MALFORMED_REQUEST = "MALFORMED_REQUEST"
MISSING_EXPECTED_CONTENT = "MISSING_EXPECTED_CONTENT"

# Protocol / content negotiation
NO_ACCEPTABLE_REPRESENTATION = "NO_ACCEPTABLE_REPRESENTATION"
UNSUPPORTED_MEDIA_TYPE = "UNSUPPORTED_MEDIA_TYPE"
METHOD_NOT_ALLOWED = "METHOD_NOT_ALLOWED"

# Internal
GENERIC_SERVICE_ERROR = "GENERIC_SERVICE_ERROR"
