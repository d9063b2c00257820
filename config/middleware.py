import logging

from apps.csp.conf import RequestConfig
from apps.csp.manager import PolicyManager

logger = logging.getLogger(__name__)


class ContentSecurityPolicyMiddleware:
    """
    Adds a Content-Security-Policy header built from the rendered content.

    A fresh ``PolicyManager`` is attached to every request as
    ``request.csp``. Configured sources are merged before the view runs:
    admin preview, then ``ADDITIONAL_SOURCES``, then enabled ``PRESETS``.
    Inline scripts and iframes rendered by the view append their own
    sources afterwards, so the header lists them last.
    """

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        policy = PolicyManager()
        policy.reset_builder()
        config = RequestConfig.from_request(request)
        policy.apply_configuration(config)
        request.csp = policy

        response = self.get_response(request)

        if not config.enabled:
            return response

        name, value = policy.get_builder().serialize()
        if value and name not in response:
            response[name] = value
        elif not value:
            logger.debug('No CSP sources registered for %s', request.path)
        return response
