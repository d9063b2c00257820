import logging

from django.http import HttpResponse, HttpResponseBadRequest
from django.views.decorators.http import require_GET

from .forms import IframeForm
from .iframe import generate_iframe_tag_from_config

logger = logging.getLogger(__name__)


@require_GET
def iframe_preview(request):
    """Render an iframe from query parameters, e.g. for an editor preview."""
    form = IframeForm(request.GET)
    if not form.is_valid():
        logger.info('Iframe preview rejected: %s', form.errors.as_json())
        return HttpResponseBadRequest(form.errors.as_ul())
    return HttpResponse(generate_iframe_tag_from_config(form.to_config(), request.csp))
