DIRECTIVE_POSTFIX = '-src'

DEFAULT_SRC = 'default-src'
SCRIPT_SRC = 'script-src'
STYLE_SRC = 'style-src'
IMG_SRC = 'img-src'
FONT_SRC = 'font-src'
CONNECT_SRC = 'connect-src'
MEDIA_SRC = 'media-src'
OBJECT_SRC = 'object-src'
FRAME_SRC = 'frame-src'
CHILD_SRC = 'child-src'
REPORT_URI = 'report-uri'

SHA_256 = 'sha256'
SHA_512 = 'sha512'
HASH_TYPES = (SHA_256, SHA_512)

HEADER_NAME = 'Content-Security-Policy'
REPORT_ONLY_HEADER_NAME = 'Content-Security-Policy-Report-Only'

# Reports are collected elsewhere; only the endpoint path is referenced here.
DEFAULT_REPORT_URI = '/csp/report/'

# Bare keywords get single-quoted when added to a directive.
SOURCE_KEYWORDS = frozenset({
    'self',
    'none',
    'unsafe-inline',
    'unsafe-eval',
    'strict-dynamic',
    'unsafe-hashes',
    'report-sample',
    'wasm-unsafe-eval',
})

# Source: https://developer.mozilla.org/en-US/docs/Web/HTML/Element/iframe
SANDBOX_VALUES = (
    'allow-forms',
    'allow-modals',
    'allow-orientation-lock',
    'allow-pointer-lock',
    'allow-popups',
    'allow-popups-to-escape-sandbox',
    'allow-presentation',
    'allow-same-origin',
    'allow-scripts',
    'allow-top-navigation',
    'allow-top-navigation-by-user-activation',
)
