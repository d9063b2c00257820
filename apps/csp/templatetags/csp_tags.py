import logging

from django import template
from django.core.exceptions import ImproperlyConfigured
from django.template.base import token_kwargs
from django.utils.safestring import mark_safe

from apps.csp.constants import SHA_256
from apps.csp.exceptions import InvalidValue
from apps.csp.iframe import generate_iframe_tag_from_config
from apps.csp.rendering import render_online_media
from apps.csp.script import InlineScript

logger = logging.getLogger(__name__)

register = template.Library()


def get_policy(context):
    policy = getattr(context.get('request'), 'csp', None)
    if policy is None:
        raise ImproperlyConfigured(
            'No content security policy on the request. Add '
            'config.middleware.ContentSecurityPolicyMiddleware to MIDDLEWARE '
            'and the request context processor to TEMPLATES.'
        )
    return policy


def as_flag(value):
    """Read a template flag; "0", "false" and "" are false like the integer 0."""
    if isinstance(value, str):
        return value.strip().lower() not in ('', '0', 'false')
    return bool(value)


class InlineScriptNode(template.Node):
    def __init__(self, nodelist, options):
        self.nodelist = nodelist
        self.options = options

    def render(self, context):
        policy = get_policy(context)
        options = {key: value.resolve(context) for key, value in self.options.items()}
        try:
            script = InlineScript(
                self.nodelist.render(context),
                hash_method=options.get('hashMethod', SHA_256),
                trim_script=as_flag(options.get('trimScript', True)),
            )
        except InvalidValue as exc:
            logger.warning('Inline script skipped: %s', exc)
            return ''
        return mark_safe(script.generate_html_tag(policy))


@register.tag
def inlinescript(parser, token):
    """Render a ``<script>`` block and allow it by hash.

    {% inlinescript hashMethod="sha512" trimScript=False %}...{% endinlinescript %}
    """
    bits = token.split_contents()[1:]
    options = token_kwargs(bits, parser)
    if bits:
        raise template.TemplateSyntaxError(
            f"'inlinescript' received invalid arguments: {' '.join(bits)}"
        )
    nodelist = parser.parse(('endinlinescript',))
    parser.delete_first_token()
    return InlineScriptNode(nodelist, options)


@register.simple_tag(takes_context=True)
def iframe(context, src='', **conf):
    """{% iframe src="https://..." class="video" width=640 sandbox="allow-scripts" %}"""
    policy = get_policy(context)
    try:
        return mark_safe(generate_iframe_tag_from_config({**conf, 'src': src}, policy))
    except InvalidValue as exc:
        logger.warning('Iframe skipped: %s', exc)
        return ''


@register.simple_tag(takes_context=True)
def media_embed(context, url, **options):
    policy = get_policy(context)
    try:
        return mark_safe(render_online_media(url, policy, **options))
    except InvalidValue as exc:
        logger.warning('Online media skipped: %s', exc)
        return ''
