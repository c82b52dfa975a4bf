"""
HTML Utility Functions
"""
import re

_TAG_PATTERN = re.compile(r"<[^>]*>")


def strip_html_tags(html: str) -> str:
    """
    Remove every <...> span from html.

    This is the plain-text body sent alongside an email template. It is a
    tag removal only: entities are not decoded, whitespace is left alone,
    and script/style contents are kept as text.

    Examples:
        >>> strip_html_tags("<h1>Welcome!</h1><p>Thanks</p>")
        'Welcome!Thanks'

        >>> strip_html_tags("Tom &amp; Jerry<br/>")
        'Tom &amp; Jerry'
    """
    return _TAG_PATTERN.sub("", html)
